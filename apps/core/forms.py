# apps/core/forms.py
from django.core.exceptions import ValidationError


def validated(form):
    """Zwraca cleaned_data albo rzuca ValidationError z błędami formularza."""
    if not form.is_valid():
        raise ValidationError([
            f"{field}: {message}" for field, messages in form.errors.items() for message in messages
        ])
    return form.cleaned_data
