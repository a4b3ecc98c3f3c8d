import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from engine import PaymentsEngine
from models import Amount, ClientId


class TestPaymentsEngineLargeScale:
    def test_1000_accounts_6000_transactions(self, tmp_path):
        """Test with 1000 accounts and 6000 transactions."""
        num_clients = 1000
        rows = ["type, client, tx, amount"]
        tx_id = 1

        # Each client gets: 3 deposits (100, 200, 300) and 2 withdrawals (50, 100)
        # Expected per client: 100 + 200 + 300 - 50 - 100 = 450, plus 50 more below = 500

        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {tx_id}, 100")
            tx_id += 1
            rows.append(f"deposit, {client_id}, {tx_id}, 200")
            tx_id += 1
            rows.append(f"deposit, {client_id}, {tx_id}, 300")
            tx_id += 1
            rows.append(f"withdrawal, {client_id}, {tx_id}, 50")
            tx_id += 1
            rows.append(f"withdrawal, {client_id}, {tx_id}, 100")
            tx_id += 1

        # Extra deposit for each client
        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {tx_id}, 50")
            tx_id += 1

        # All clients get extra 50
        expected_balance = Amount.from_decimal("500")  # 450 + 50

        csv_file = tmp_path / "large_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = engine.process_file(str(csv_file))

        assert len(accounts) == num_clients

        for client_id in range(1, num_clients + 1):
            assert accounts[ClientId(client_id)].available == expected_balance, \
                f"Client {client_id}: expected {expected_balance}, got {accounts[ClientId(client_id)].available}"
            assert accounts[ClientId(client_id)].held == Amount.from_decimal("0")
            assert accounts[ClientId(client_id)].locked is False

    def test_with_disputes_resolves_chargebacks(self, tmp_path):
        """Test with disputes, resolves, and chargebacks across 50 accounts."""
        rows = ["type, client, tx, amount"]

        # Client 1-10: Normal deposits only
        # Expected: 500 each (100 + 150 + 250)
        for client_id in range(1, 11):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 1}, 100")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 2}, 150")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 3}, 250")

        # Client 11-20: Deposit -> Dispute -> Resolve
        # Expected: 500 each, held=0, locked=False
        for client_id in range(11, 21):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 1}, 100")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 2}, 150")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 3}, 250")
        for client_id in range(11, 21):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 1},")
        for client_id in range(11, 21):
            rows.append(f"resolve, {client_id}, {client_id * 100 + 1},")

        # Client 21-30: Deposit -> Dispute -> Chargeback
        # Expected: 400 each (500 - 100 chargebacked), locked=True
        for client_id in range(21, 31):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 1}, 100")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 2}, 150")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 3}, 250")
        for client_id in range(21, 31):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 1},")
        for client_id in range(21, 31):
            rows.append(f"chargeback, {client_id}, {client_id * 100 + 1},")

        # Client 31-40: Deposit -> Withdrawal -> Dispute (on deposit)
        # Expected: available=150 (300 - 150 held), held=150, total=300
        for client_id in range(31, 41):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 1}, 150")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 2}, 250")
            rows.append(f"withdrawal, {client_id}, {client_id * 100 + 3}, 100")
        for client_id in range(31, 41):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 1},")

        # Client 41-50: Multiple deposits, dispute middle one, resolve
        # Expected: 600 each, held=0
        for client_id in range(41, 51):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 1}, 100")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 2}, 200")
            rows.append(f"deposit, {client_id}, {client_id * 100 + 3}, 300")
        for client_id in range(41, 51):
            rows.append(f"dispute, {client_id}, {client_id * 100 + 2},")
        for client_id in range(41, 51):
            rows.append(f"resolve, {client_id}, {client_id * 100 + 2},")

        csv_file = tmp_path / "disputes_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = engine.process_file(str(csv_file))

        # Verify Client 1-10: Normal
        for client_id in range(1, 11):
            assert accounts[ClientId(client_id)].available == Amount.from_decimal("500"), f"Client {client_id}"
            assert accounts[ClientId(client_id)].held == Amount.from_decimal("0")
            assert accounts[ClientId(client_id)].locked is False

        # Verify Client 11-20: Disputed then resolved
        for client_id in range(11, 21):
            assert accounts[ClientId(client_id)].available == Amount.from_decimal("500"), f"Client {client_id}"
            assert accounts[ClientId(client_id)].held == Amount.from_decimal("0")
            assert accounts[ClientId(client_id)].locked is False

        # Verify Client 21-30: Chargebacked
        for client_id in range(21, 31):
            assert accounts[ClientId(client_id)].available == Amount.from_decimal("400"), f"Client {client_id}"
            assert accounts[ClientId(client_id)].held == Amount.from_decimal("0")
            assert accounts[ClientId(client_id)].total == Amount.from_decimal("400")
            assert accounts[ClientId(client_id)].locked is True

        # Verify Client 31-40: Disputed (held)
        for client_id in range(31, 41):
            assert accounts[ClientId(client_id)].available == Amount.from_decimal("150"), f"Client {client_id}"
            assert accounts[ClientId(client_id)].held == Amount.from_decimal("150")
            assert accounts[ClientId(client_id)].total == Amount.from_decimal("300")
            assert accounts[ClientId(client_id)].locked is False

        # Verify Client 41-50: Disputed then resolved
        for client_id in range(41, 51):
            assert accounts[ClientId(client_id)].available == Amount.from_decimal("600"), f"Client {client_id}"
            assert accounts[ClientId(client_id)].held == Amount.from_decimal("0")
            assert accounts[ClientId(client_id)].locked is False

    def test_fractional_amounts_stay_exact(self, tmp_path):
        """Many small deposits and withdrawals accumulate without drift."""
        rows = ["type, client, tx, amount"]
        tx_id = 1
        for client_id in range(1, 101):
            for _ in range(50):
                rows.append(f"deposit, {client_id}, {tx_id}, 0.1")
                tx_id += 1
            for _ in range(20):
                rows.append(f"withdrawal, {client_id}, {tx_id}, 0.0003")
                tx_id += 1

        csv_file = tmp_path / "fractional_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = engine.process_file(str(csv_file))

        assert engine.stats.applied == 7000
        for client_id in range(1, 101):
            account = accounts[ClientId(client_id)]
            # 50 * 0.1 - 20 * 0.0003 = 4.994
            assert account.available == Amount.from_decimal("4.994"), f"Client {client_id}"
            assert str(account.total) == "4.994"
