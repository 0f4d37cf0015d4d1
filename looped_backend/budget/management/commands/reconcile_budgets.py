# budget/management/commands/reconcile_budgets.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from budget.models import Budget, BudgetTransaction
from budget.services.ledger_service import reconcile_budget


class Command(BaseCommand):
    help = "Compare every cached budget balance with the sum of its transaction log."

    def add_arguments(self, parser):
        parser.add_argument(
            "--user",
            dest="user_id",
            help="Only check this user id (optional)",
        )
        parser.add_argument(
            "--fix",
            action="store_true",
            help="Rewrite drifted balances from the transaction log.",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any drift is found.",
        )

    def handle(self, *args, **options):
        fix = bool(options.get("fix"))
        strict = bool(options.get("strict"))

        User = get_user_model()

        user_ids = set(Budget.objects.values_list("user_id", flat=True))
        user_ids |= set(BudgetTransaction.objects.values_list("user_id", flat=True).distinct())

        if options.get("user_id"):
            user_ids &= {User._meta.pk.to_python(options["user_id"])}

        self.stdout.write(self.style.MIGRATE_HEADING("Budget Reconciliation"))
        self.stdout.write(f"Budgets to check: {len(user_ids)}")
        self.stdout.write("")

        drifted = 0

        for user in User.objects.filter(pk__in=user_ids).order_by("pk"):
            result = reconcile_budget(user=user, fix=fix)

            if result.is_consistent:
                continue

            drifted += 1
            line = (
                f"user={user.pk} cached={result.cached_balance} "
                f"ledger={result.ledger_balance} drift={result.drift}"
            )
            if result.fixed:
                self.stdout.write(self.style.WARNING(f"[FIXED] {line}"))
            else:
                self.stderr.write(self.style.ERROR(f"[FAIL] {line}"))

        self.stdout.write("")
        if drifted == 0:
            self.stdout.write(self.style.SUCCESS("[OK] Every balance matches its transaction log"))
        elif fix:
            self.stdout.write(self.style.SUCCESS(f"Repaired {drifted} balance(s)"))
        else:
            self.stderr.write(self.style.ERROR(f"Found {drifted} drifted balance(s)"))

        return self._exit(strict and drifted > 0 and not fix)

    def _exit(self, fail: bool):
        if fail:
            raise SystemExit(1)
        return None
