"""
Text-Menu Front End

Interactive loop over BankFacade: a main menu for login and sign-up and an
account menu once an identity is logged in. Input and output go through
injectable callables so the loop can be driven from tests.
"""

from decimal import Context, Decimal, MAX_EMAX, MAX_PREC, MIN_EMIN, ROUND_HALF_EVEN
from enum import Enum
from typing import Callable, List, Optional, Type

from pydantic import ValidationError

from .api import BankFacade
from .exceptions import (
    CredentialMismatch, DataIntegrityError, FinCoreError, IdentityNotFound
)
from .identities import Identity
from .logging_config import get_logger, log_action
from .validation import (
    AmountForm, IndividualSignupForm, LoginForm, OrganizationSignupForm,
    describe_validation_error
)

InputFunc = Callable[[str], str]
OutputFunc = Callable[[str], None]


class MainOption(Enum):
    LOGIN = "Login"
    CREATE_ACCOUNT = "Create account"
    CREATE_BUSINESS_ACCOUNT = "Create business account"
    EXIT = "Exit"


class AccountOption(Enum):
    BALANCE = "Balance"
    DEPOSIT = "Deposit"
    WITHDRAW = "Withdraw"
    LOGOUT = "Logout"
    DELETE_ACCOUNT = "Delete account"


CENTS = Decimal("0.01")
_DISPLAY = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN, rounding=ROUND_HALF_EVEN)


def format_money(amount: Decimal) -> str:
    """Display rounding only; the ledger itself never rounds"""
    return f"${amount.quantize(CENTS, context=_DISPLAY)}"


class BankCLI:
    """Menu loop for one terminal user"""

    def __init__(self, api: BankFacade, input_func: InputFunc = input,
                 output_func: OutputFunc = print):
        self.api = api
        self.read = input_func
        self.write = output_func
        self.user: Optional[Identity] = None
        self.logger = get_logger("fincore.cli")

    def run(self) -> None:
        """Loop until the user picks Exit or input runs out"""
        try:
            while True:
                if self.user is None:
                    if not self.main_menu():
                        return
                else:
                    self.account_menu()
        except (EOFError, KeyboardInterrupt):
            self.write("")

    # Menus

    def main_menu(self) -> bool:
        """One pass of the main menu; False once the user exits"""
        self.write("-" * 60)
        self.write("Welcome to the FinCore CLI Banking App")
        self.write("Please select an option below")
        self.write("-" * 60)
        option = self._choose(MainOption)
        if option is MainOption.EXIT:
            self.write("Goodbye!")
            return False
        if option is MainOption.LOGIN:
            self.login()
        elif option is MainOption.CREATE_ACCOUNT:
            self.create_individual()
        else:
            self.create_organization()
        return True

    def account_menu(self) -> None:
        user = self.user
        self.write("=" * 8 + " FinCore CLI Banking App " + "=" * 8)
        self.write(f"Account Holder: {user.display_name}")
        self._show_balance(prefix="Current Balance: ")
        option = self._choose(AccountOption)
        if option is AccountOption.BALANCE:
            self._show_balance(prefix="Current Balance: ")
        elif option is AccountOption.DEPOSIT:
            self._move_money(self.api.deposit, "deposited")
        elif option is AccountOption.WITHDRAW:
            self._move_money(self.api.withdraw, "withdrawn")
        elif option is AccountOption.LOGOUT:
            self.api.logout(user)
            self.user = None
        else:
            self.delete_account()

    # Actions

    def login(self) -> None:
        self.write("Please enter your username and password to login")
        form = self._form(LoginForm, username=self.read("Username or business name: "),
                          password=self.read("Password: "))
        if form is None:
            return
        try:
            self.user = self.api.login(form.username, form.password)
        except IdentityNotFound as e:
            self.write(f"User Not Found! {e.message}")
        except CredentialMismatch as e:
            self.write(f"Password Mismatch! {e.message}")
        except FinCoreError as e:
            self._report(e)

    def create_individual(self) -> None:
        form = self._form(
            IndividualSignupForm,
            username=self.read("Please enter an account username between 6-20 characters: "),
            password=self.read("Please create a password, between 12 and 64 characters, "
                               "including at least 2 numbers and special characters: "),
            first_name=self.read("Please enter your first name: "),
            last_name=self.read("Please enter your surname: ")
        )
        if form is None:
            return
        try:
            self.user = self.api.create_individual(
                form.username, form.password, form.first_name, form.last_name
            )
        except FinCoreError as e:
            self._report(e)

    def create_organization(self) -> None:
        form = self._form(
            OrganizationSignupForm,
            business_name=self.read("Please enter your business name: "),
            password=self.read("Please create a password, between 12 and 64 characters, "
                               "including at least 2 numbers and special characters: ")
        )
        if form is None:
            return
        try:
            self.user = self.api.create_organization(form.business_name, form.password)
        except FinCoreError as e:
            self._report(e)

    def delete_account(self) -> None:
        answer = self.read("Type DELETE to permanently close this account: ")
        if answer.strip() != "DELETE":
            self.write("Account not deleted.")
            return
        try:
            self.api.delete_identity(self.user)
        except FinCoreError as e:
            self._report(e)
            return
        self.write("Account deleted.")
        self.user = None

    # Private helper methods

    def _choose(self, options: Type[Enum]):
        choices: List[Enum] = list(options)
        while True:
            for number, option in enumerate(choices, start=1):
                self.write(f"{number}. {option.value}")
            raw = self.read("> ").strip()
            if raw.isdigit() and 1 <= int(raw) <= len(choices):
                return choices[int(raw) - 1]
            self.write("Invalid choice")

    def _form(self, form_type, **values):
        try:
            return form_type(**values)
        except ValidationError as e:
            self.write(describe_validation_error(e))
            return None

    def _show_balance(self, prefix: str) -> None:
        try:
            balance = self.api.get_balance(self.user.id)
        except FinCoreError as e:
            self._report(e)
            return
        self.write(prefix + format_money(balance))

    def _move_money(self, operation, verb: str) -> None:
        form = self._form(AmountForm, amount=self.read("Enter the amount: ").strip())
        if form is None:
            return
        try:
            operation(self.user, form.amount)
        except FinCoreError as e:
            self._report(e)
            return
        self.write(f"Amount {verb}: {format_money(form.amount)}")
        self._show_balance(prefix="New balance: ")

    def _report(self, error: FinCoreError) -> None:
        if isinstance(error, DataIntegrityError):
            log_action(self.logger, "error", "Repository inconsistency reported to user",
                       user_id=error.identity_id, action="cli",
                       details={'error': error.message})
            self.write("A data problem prevented this operation. Please contact support.")
        else:
            self.write(error.message)


def main() -> int:
    """Console entry point"""
    from .config import get_config
    from .logging_config import setup_logging
    from .system import BankingSystem

    config = get_config()
    setup_logging(config.log_level, log_format=config.log_format)
    system = BankingSystem(config)
    try:
        BankCLI(system.api).run()
    finally:
        system.close()
    return 0
