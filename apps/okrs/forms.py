from django import forms
from .models import Objective


class KeyResultValueForm(forms.Form):
    # Dla KR-ów typu boolean wystarczy true/false
    value = forms.JSONField()

    def clean_value(self):
        value = self.cleaned_data['value']
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return float(value)
        raise forms.ValidationError("value must be a number or a boolean")


class KeyResultEditForm(forms.Form):
    description = forms.CharField(max_length=300, required=False)
    target_value = forms.FloatField(required=False)


class ObjectiveEditForm(forms.Form):
    objective = forms.CharField(max_length=300)


class QuarterlySetupForm(forms.Form):
    pillar = forms.ChoiceField(choices=Objective.PillarChoices.choices)
    objective = forms.CharField(max_length=300)
    key_results = forms.JSONField()
    draft = forms.BooleanField(required=False)

    def clean_key_results(self):
        krs = self.cleaned_data['key_results']
        if not isinstance(krs, list) or not krs:
            raise forms.ValidationError("key_results must be a non-empty list")
        return krs
