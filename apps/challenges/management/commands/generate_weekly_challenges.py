import random

from django.core.management.base import BaseCommand

from apps.challenges.services import WeeklyChallengeService


class Command(BaseCommand):
    help = 'Losuje wyzwania na bieżący tydzień (jeśli jeszcze nie istnieją)'

    def add_arguments(self, parser):
        parser.add_argument('--regenerate', action='store_true', help='Usuń istniejący zestaw i losuj od nowa')
        parser.add_argument('--seed', type=int, default=None, help='Ziarno generatora losowego')

    def handle(self, *args, **options):
        service = WeeklyChallengeService(rng=random.Random(options['seed']))
        if options['regenerate']:
            data = service.regenerate()
        else:
            data = service.get_or_create_weekly_challenges()

        week = data['week']
        self.stdout.write(self.style.SUCCESS(
            f"Tydzień {week['year']}-W{week['week_number']:02d}: {len(data['challenges'])} wyzwań."
        ))
        for c in data['challenges']:
            mark = 'x' if c['completed'] else ' '
            self.stdout.write(f"[{mark}] {c['slot_index']}. {c['action_text']} ({c['protocol_key']})")
