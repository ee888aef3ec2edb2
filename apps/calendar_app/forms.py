from django import forms
from .models import CalendarPattern

DATE_FORMATS = ['%Y-%m-%d']
TIME_FORMATS = ['%H:%M', '%H:%M:%S']


class EventForm(forms.Form):
    # Wszystkie pola opcjonalne: ten sam formularz służy do tworzenia i częściowej edycji
    title = forms.CharField(max_length=200, required=False)
    category = forms.CharField(max_length=50, required=False)
    notes = forms.CharField(required=False)
    start_date = forms.DateField(required=False, input_formats=DATE_FORMATS)
    end_date = forms.DateField(required=False, input_formats=DATE_FORMATS)
    start_time = forms.TimeField(required=False, input_formats=TIME_FORMATS)
    end_time = forms.TimeField(required=False, input_formats=TIME_FORMATS)
    all_day = forms.NullBooleanField(required=False)
    affects_row_appearance = forms.NullBooleanField(required=False)
    priority = forms.IntegerField(required=False, min_value=1, max_value=10)
    is_pto = forms.NullBooleanField(required=False)


class DateRangeForm(forms.Form):
    start = forms.DateField(required=False, input_formats=DATE_FORMATS)
    end = forms.DateField(required=False, input_formats=DATE_FORMATS)
    year = forms.IntegerField(required=False, min_value=1900, max_value=9999)

    def clean(self):
        data = super().clean()
        if data.get('year') is None and not (data.get('start') and data.get('end')):
            raise forms.ValidationError("Provide year or both start and end")
        return data


class PatternForm(forms.Form):
    name = forms.CharField(max_length=200)
    pattern_type = forms.ChoiceField(choices=CalendarPattern.PatternTypeChoices.choices)
    category = forms.CharField(max_length=50, required=False)
    notes = forms.CharField(required=False)
    start_date = forms.DateField(required=False, input_formats=DATE_FORMATS)
    end_date = forms.DateField(required=False, input_formats=DATE_FORMATS)
    rule_json = forms.JSONField(required=False)
    default_affects_row_appearance = forms.BooleanField(required=False)
    default_priority = forms.IntegerField(required=False, min_value=1, max_value=10)

    def clean_rule_json(self):
        rule = self.cleaned_data['rule_json']
        if rule is None:
            return {}
        if not isinstance(rule, dict):
            raise forms.ValidationError("rule_json must be an object")
        return rule


class GenerateForm(forms.Form):
    until = forms.DateField(input_formats=DATE_FORMATS)
