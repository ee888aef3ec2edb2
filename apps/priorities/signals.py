# apps/priorities/signals.py
from django.dispatch import Signal

# Wysyłany po każdej zmianie priorytetu/kamienia milowego.
# kwargs: action ('commit' | 'complete' | 'milestone_commit' | 'milestone_complete'), object_id
priorities_changed = Signal()
