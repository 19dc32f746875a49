"""
Test suite for the text-menu front end

Drives BankCLI with scripted input and inspects what it printed.
"""

import pytest

from fincore.cli import BankCLI, format_money
from fincore.config import FinCoreConfig
from fincore.system import BankingSystem


class ScriptedIO:
    """Feeds canned answers to input() and records output"""

    def __init__(self, answers):
        self.answers = list(answers)
        self.lines = []

    def read(self, prompt=""):
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    def write(self, text=""):
        self.lines.append(text)

    @property
    def text(self):
        return "\n".join(self.lines)


@pytest.fixture
def system():
    system = BankingSystem(FinCoreConfig(storage_backend="memory", seed_demo_data=True))
    yield system
    system.close()


def _run(system, answers):
    io = ScriptedIO(answers)
    BankCLI(system.api, input_func=io.read, output_func=io.write).run()
    return io


class TestCLI:
    """Test menu flows end to end"""

    def test_sign_up_deposit_withdraw(self, system):
        io = _run(system, [
            "2", "alice-smith", "Secret#12word!", "Alice", "Smith",
            "2", "100.50",
            "3", "50.25",
            "1",
            "4",
            "4",
        ])
        assert "Account Holder: Alice Smith" in io.text
        assert "New balance: $100.50" in io.text
        assert "Current Balance: $50.25" in io.text
        assert io.lines[-1] == "Goodbye!"

    def test_login_with_demo_user(self, system):
        io = _run(system, ["1", "TestCustA", "Pa55word!!123$1", "1", "4", "4"])
        assert "Account Holder: John Test" in io.text
        assert "Current Balance: $0.00" in io.text

    def test_wrong_password(self, system):
        io = _run(system, ["1", "TestCustA", "Pa55word!!123$9", "4"])
        assert "Password Mismatch!" in io.text
        assert "Account Holder" not in io.text

    def test_unknown_user(self, system):
        io = _run(system, ["1", "Nobodyhere", "Pa55word!!123$9", "4"])
        assert "User Not Found!" in io.text

    def test_validation_message(self, system):
        io = _run(system, ["1", "ab_c", "Pa55word!!123$1", "4"])
        assert "Username length incorrect" in io.text

    def test_duplicate_business(self, system):
        io = _run(system, ["3", "testbusiness", "Pa55word!!123$3", "4"])
        assert "already exists" in io.text

    def test_business_logs_back_in_by_name(self, system):
        """Test a business name with a space is accepted at the login prompt"""
        io = _run(system, [
            "3", "Acme Corp", "Pa55word!!123$3", "4",
            "1", "Acme Corp", "Pa55word!!123$3", "4",
            "4",
        ])
        assert io.text.count("Account Holder: Acme Corp") == 2
        assert "User Not Found!" not in io.text

    def test_invalid_menu_choice(self, system):
        io = _run(system, ["9", "x", "4"])
        assert io.text.count("Invalid choice") == 2

    def test_delete_account(self, system):
        io = _run(system, ["3", "Acme Holdings", "Pa55word!!123$3", "5", "DELETE", "4"])
        assert "Account deleted." in io.text
        assert system.repository.find_by_username("Acme Holdings") is None

    def test_bad_amount(self, system):
        io = _run(system, ["1", "TestCustB", "Pa55word!!123$2", "2", "-3", "4", "4"])
        assert "Amount must be greater than zero" in io.text

    def test_eof_ends_loop(self, system):
        io = _run(system, [])
        assert "Welcome to the FinCore CLI Banking App" in io.text


class TestFormatting:
    def test_format_money_rounds_half_even(self):
        from decimal import Decimal
        assert format_money(Decimal("2.345")) == "$2.34"
        assert format_money(Decimal("2.355")) == "$2.36"
        assert format_money(Decimal("-250")) == "$-250.00"
