from django import forms


class EntryDateForm(forms.Form):
    date = forms.DateField(required=False, input_formats=['%Y-%m-%d'])


class ReorderForm(forms.Form):
    ids = forms.JSONField()

    def clean_ids(self):
        ids = self.cleaned_data['ids']
        if not isinstance(ids, list) or not all(isinstance(i, int) for i in ids):
            raise forms.ValidationError("ids must be a list of integers")
        if len(set(ids)) != len(ids):
            raise forms.ValidationError("ids must be unique")
        return ids
