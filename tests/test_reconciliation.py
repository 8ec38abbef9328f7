"""Tests for the balance audit and the scheduled audit job."""

import datetime as dt

import pytest
from sqlmodel import select

from journal import database
from journal.engine import scheduler as audit_scheduler
from journal.models.ledger_event import LedgerEvent
from journal.models.trade import Trade
from journal.repositories.accounts import AccountRepository
from journal.services.ledger import TradeLedgerService
from journal.services.reconciliation import audit_balances, expected_balance
from tests.factories import create_request, update_request


def _deposit(account_id, amount):
    return create_request(account_id=account_id, type="DEPOSIT", pair="", entry=0, lots=0, amount=amount)


def _events(session, kind=None):
    stmt = select(LedgerEvent)
    if kind:
        stmt = stmt.where(LedgerEvent.kind == kind)
    return session.exec(stmt).all()


def test_expected_balance_sums_ledger_effects():
    day, at = dt.date(2024, 1, 1), dt.time(9, 0)
    trades = [
        Trade(user_id=1, date=day, time=at, type="DEPOSIT", amount=100.0),
        Trade(user_id=1, date=day, time=at, type="WITHDRAW", amount=30.0),
        Trade(user_id=1, date=day, time=at, type="BUY", pl=20.0),
        Trade(user_id=1, date=day, time=at, type="SELL", pl=None),
    ]
    assert expected_balance(trades) == 90.0
    assert expected_balance([]) == 0.0


class TestAudit:
    def test_consistent_ledger_has_no_drift(self, session, user, make_account):
        account = make_account(user)
        ledger = TradeLedgerService(session)
        ledger.create_trade(user.id, _deposit(account.id, 1000))
        trade = ledger.create_trade(user.id, create_request(account_id=account.id, exit=1.1050))
        ledger.update_trade(user.id, trade.id, update_request(account_id=account.id, exit=1.1100))

        assert audit_balances(session) == []
        assert _events(session) == []

    def test_drift_is_reported_and_recorded(self, session, user, make_account, balance_of):
        account = make_account(user)
        TradeLedgerService(session).create_trade(user.id, _deposit(account.id, 1000))
        AccountRepository(session).apply_balance_delta(account.id, user.id, 50.0)
        session.commit()

        drifts = audit_balances(session)

        assert len(drifts) == 1
        drift = drifts[0]
        assert drift.account_id == account.id
        assert drift.recorded_balance == 1050.0
        assert drift.expected_balance == 1000.0
        assert drift.drift == 50.0
        assert drift.corrected is False
        assert balance_of(account.id) == 1050.0

        recorded = _events(session, "balance_drift")
        assert len(recorded) == 1
        assert recorded[0].delta == 50.0

    def test_fix_posts_correcting_delta(self, session, user, make_account, balance_of):
        account = make_account(user, balance=250)

        drifts = audit_balances(session, fix=True)

        assert drifts[0].corrected is True
        assert balance_of(account.id) == 0.0
        corrected = _events(session, "balance_corrected")
        assert len(corrected) == 1
        assert corrected[0].delta == -250.0
        assert audit_balances(session) == []

    def test_dry_run_writes_nothing(self, session, user, make_account):
        make_account(user, balance=10)

        assert len(audit_balances(session, record=False)) == 1
        assert _events(session) == []

    def test_scoped_to_one_user(self, session, user, other_user, make_account):
        make_account(user, balance=10)
        theirs = make_account(other_user, balance=20)

        drifts = audit_balances(session, user_id=other_user.id, record=False)
        assert [d.account_id for d in drifts] == [theirs.id]

    def test_unreposted_cash_edit_shows_as_drift(self, session, user, make_account):
        account = make_account(user)
        ledger = TradeLedgerService(session)
        trade = ledger.create_trade(user.id, _deposit(account.id, 1000))
        ledger.update_trade(user.id, trade.id, update_request(
            account_id=account.id, type="DEPOSIT", pair="", entry=0, lots=0, amount=1500,
        ))

        drifts = audit_balances(session, record=False)
        assert drifts[0].drift == -500.0


class TestScheduledAudit:
    @pytest.mark.asyncio
    async def test_run_balance_audit_records_drift(
        self, engine, session, user, make_account, monkeypatch
    ):
        monkeypatch.setattr(database, "engine", engine)
        make_account(user, balance=75)

        drifts = await audit_scheduler.run_balance_audit()

        assert len(drifts) == 1
        assert drifts[0].drift == 75.0
        assert len(_events(session, "balance_drift")) == 1

    @pytest.mark.asyncio
    async def test_run_balance_audit_logs_failures(self, monkeypatch, caplog):
        def boom(*args, **kwargs):
            raise RuntimeError("database is locked")

        monkeypatch.setattr(audit_scheduler, "audit_balances", boom)

        assert await audit_scheduler.run_balance_audit() == []
        assert "Balance audit failed" in caplog.text

    def test_disabled_interval_does_not_start(self, monkeypatch):
        monkeypatch.setattr(audit_scheduler.settings, "reconcile_interval_minutes", 0)

        audit_scheduler.start_scheduler()

        status = audit_scheduler.get_scheduler_status()
        assert status["running"] is False
        assert status["job_count"] == 0

    def test_add_audit_job_uses_interval(self):
        try:
            audit_scheduler.add_audit_job(15)
            job = audit_scheduler.scheduler.get_job(audit_scheduler.RECONCILE_JOB_ID)
            assert job is not None
            assert job.trigger.interval == dt.timedelta(minutes=15)
        finally:
            audit_scheduler.scheduler.remove_all_jobs()


def test_cli_reconcile_prints_and_fixes(engine, session, user, make_account, balance_of, monkeypatch, capsys):
    from journal import cli

    monkeypatch.setattr(cli, "engine", engine)
    account = make_account(user, "Swing", balance=40)

    cli.reconcile(fix=False)
    out = capsys.readouterr().out
    assert "Swing" in out
    assert "+40.00" in out
    assert "--fix" in out
    assert balance_of(account.id) == 40.0
    session.commit()

    cli.reconcile(fix=True)
    assert "(corrected)" in capsys.readouterr().out
    assert balance_of(account.id) == 0.0
    session.commit()

    cli.reconcile()
    assert "All account balances match" in capsys.readouterr().out


def test_float_noise_on_large_balances_is_not_drift(session, user, make_account):
    account = make_account(user)
    TradeLedgerService(session).create_trade(user.id, _deposit(account.id, 1e10))
    repo = AccountRepository(session)

    # A couple of ULPs at this magnitude, well above the absolute tolerance
    repo.apply_balance_delta(account.id, user.id, 3e-6)
    session.commit()
    assert audit_balances(session, record=False) == []

    repo.apply_balance_delta(account.id, user.id, 50.0)
    session.commit()
    assert len(audit_balances(session, record=False)) == 1
