from django import forms

from .domain.entities import RandomizationStrategy


class ProtocolUpdateForm(forms.Form):
    # Brak pola = bez zmian
    is_enabled = forms.NullBooleanField(required=False)
    max_per_week = forms.IntegerField(required=False, min_value=0)
    config = forms.JSONField(required=False)

    def clean_config(self):
        config = self.cleaned_data['config']
        if config is not None and not isinstance(config, dict):
            raise forms.ValidationError("config must be an object")
        return config


class ConfigUpdateForm(forms.Form):
    key = forms.ChoiceField(choices=[('total_challenges', 'total_challenges'),
                                     ('randomization_strategy', 'randomization_strategy')])
    # int albo string, zależnie od klucza; walidacja w serwisie
    value = forms.Field()


class StrategyForm(forms.Form):
    strategy = forms.ChoiceField(choices=[(s.value, s.value) for s in RandomizationStrategy])
