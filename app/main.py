"""
Console Frontend for InvestWise

This is the interface the operator interacts with: a numbered menu,
re-prompting until each answer passes validation.

DESIGN PRINCIPLES:
1. Simple, numbered menus
2. Clear error messages, then ask again
3. Every change is saved immediately; a failed save is shown, not hidden
4. Nothing is shown for an empty portfolio except a plain note
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Callable, Optional, TypeVar

import structlog

from investwise.audit import configure_logging, create_correlation_id
from investwise.config import Settings, get_settings, validate_all_settings
from investwise.models.portfolio import IndexOutOfRangeError
from investwise.orchestrator import InvestWiseSession, create_session
from investwise.services.accounts import AuthenticationError, DuplicateUsernameError
from investwise.services.storage import PersistenceError
from investwise.validation import InputValidationError, InputValidator, format_issue
from investwise.zakat import format_money


T = TypeVar("T")

logger = structlog.get_logger(__name__)

UNAUTHENTICATED_MENU = ["Sign Up", "Login", "Exit"]
AUTHENTICATED_MENU = [
    "View Portfolio",
    "Add Asset",
    "Edit/Remove Asset",
    "Calculate Zakat",
    "Connect Bank Account",
    "Logout",
]


class ConsoleApp:
    """
    Menu loop over one InvestWiseSession.

    `input_func` and `output` default to the builtins; tests pass
    scripted replacements.
    """

    def __init__(
        self,
        session: InvestWiseSession,
        input_func: Optional[Callable[[str], str]] = None,
        output: Optional[Callable[[str], None]] = None,
        validator: Optional[InputValidator] = None,
    ):
        self._session = session
        self._input = input_func or input
        self._output = output or print
        self._validator = validator or InputValidator()
        self._running = True

    # ------------------------------------------------------------------
    # Prompt helpers
    # ------------------------------------------------------------------

    def _say(self, text: str = "") -> None:
        self._output(text)

    def _ask(self, prompt: str, parse: Callable[[str], T]) -> T:
        """Prompt until `parse` accepts the answer."""
        while True:
            raw = self._input(prompt)
            try:
                return parse(raw)
            except InputValidationError as e:
                self._say(format_issue(e.issue))

    def _money(self, amount: float) -> str:
        return format_money(amount, self._session.settings.app.currency_symbol)

    def _warn_save_failed(self, error: PersistenceError) -> None:
        self._say(f"⚠️ Changes kept in memory but could not be saved: {error}")
        self._say("   They will be written again with the next successful save.")

    # ------------------------------------------------------------------
    # Menus
    # ------------------------------------------------------------------

    async def run(self) -> int:
        """Run until the operator exits. Returns the process exit code."""
        self._say("=== InvestWise App ===")
        while self._running:
            try:
                if self._session.is_authenticated:
                    await self._authenticated_menu()
                else:
                    await self._unauthenticated_menu()
            except EOFError:
                self._say()
                await self.exit()
            except Exception as e:
                user = self._session.current_user
                await self._session.audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    details={"username": user.username if user else None},
                    correlation_id=create_correlation_id(),
                )
                raise
        return 0

    def _show_menu(self, title: str, options: list[str]) -> int:
        self._say()
        self._say(title)
        for number, label in enumerate(options, start=1):
            self._say(f"{number}. {label}")
        raw = self._input("Choose an option: ")
        return self._validator.menu_choice(raw, len(options))

    async def _unauthenticated_menu(self) -> None:
        try:
            choice = self._show_menu("Main Menu (Not Logged In)", UNAUTHENTICATED_MENU)
        except InputValidationError as e:
            self._say(format_issue(e.issue))
            return

        if choice == 1:
            await self.sign_up()
        elif choice == 2:
            await self.login()
        else:
            await self.exit()

    async def _authenticated_menu(self) -> None:
        username = self._session.current_user.username
        try:
            choice = self._show_menu(f"Main Menu (Logged in as {username})", AUTHENTICATED_MENU)
        except InputValidationError as e:
            self._say(format_issue(e.issue))
            return

        if choice == 1:
            self.view_portfolio()
        elif choice == 2:
            await self.add_asset()
        elif choice == 3:
            await self.edit_remove_asset()
        elif choice == 4:
            await self.calculate_zakat()
        elif choice == 5:
            await self.connect_bank()
        else:
            await self.logout()

    # ------------------------------------------------------------------
    # Account actions
    # ------------------------------------------------------------------

    async def sign_up(self) -> None:
        self._say()
        self._say("--- Sign Up ---")
        v = self._validator
        users = self._session.state.users

        username = self._ask("Enter username: ", lambda raw: v.username(raw, users))
        name = self._ask("Enter name: ", v.name)
        email = self._ask("Enter email: ", v.email)
        password = self._ask("Enter password (min 8 chars): ", v.password)

        try:
            await self._session.sign_up(
                username=username,
                name=name,
                email=email,
                password=password,
                correlation_id=create_correlation_id(),
            )
        except DuplicateUsernameError as e:
            self._say(f"❌ {e}")
            return
        except PersistenceError as e:
            self._warn_save_failed(e)
        self._say("✅ Sign-up successful! You can now login.")

    async def login(self) -> None:
        self._say()
        self._say("--- Login ---")
        username = self._input("Enter username: ").strip()
        password = self._input("Enter password: ")
        try:
            user = await self._session.login(username, password, create_correlation_id())
        except AuthenticationError as e:
            self._say(f"❌ {e}")
            return
        self._say(f"✅ Login successful! Welcome, {user.name}.")

    async def logout(self) -> None:
        await self._session.logout(create_correlation_id())
        self._say("Logged out successfully.")

    async def exit(self) -> None:
        try:
            await self._session.shutdown(create_correlation_id())
        except PersistenceError as e:
            self._say(f"⚠️ Could not save data before exit: {e}")
        self._say("Thank you for using InvestWise!")
        self._running = False

    # ------------------------------------------------------------------
    # Portfolio actions
    # ------------------------------------------------------------------

    def view_portfolio(self) -> bool:
        """Print the indexed holdings. Returns False if there are none."""
        self._say()
        self._say("--- Your Portfolio ---")
        portfolio = self._session.portfolio()
        entries = portfolio.list_assets()
        if not entries:
            self._say("You don't have any assets yet.")
            return False

        self._say("Your assets:")
        for entry in entries:
            self._say(
                f"{entry.index}: {entry.asset.kind.value} - "
                f"Quantity: {entry.asset.quantity:.2f}, Value: {self._money(entry.value)}"
            )
        self._say()
        self._say(f"Total Portfolio Value: {self._money(portfolio.total_value())}")

        bank = self._session.linked_bank()
        if bank is not None:
            self._say(f"Linked bank: {bank.bank_name} (card {bank.masked_card_number})")
        return True

    async def add_asset(self) -> None:
        self._say()
        self._say("--- Add Asset ---")
        v = self._validator
        kind = self._ask("Enter asset type (STOCK/REAL_ESTATE/CRYPTO/GOLD): ", v.asset_kind)
        quantity = self._ask("Enter quantity: ", v.positive_quantity)

        try:
            await self._session.portfolio().add_asset(kind, quantity, create_correlation_id())
        except PersistenceError as e:
            self._warn_save_failed(e)
        self._say("✅ Asset added to portfolio!")

    async def edit_remove_asset(self) -> None:
        self._say()
        self._say("--- Edit/Remove Asset ---")
        portfolio = self._session.portfolio()
        if not portfolio.has_assets():
            self._say("You don't have any assets to edit.")
            return

        self.view_portfolio()
        size = len(portfolio.list_assets())
        index = self._ask(
            "Enter asset index to edit/remove (or -1 to cancel): ",
            lambda raw: self._validator.asset_index(raw, size),
        )
        if index is None:
            return

        choice = self._input("Edit (E) or Remove (R)? ").strip().upper()
        correlation_id = create_correlation_id()
        try:
            if choice == "E":
                new_quantity = self._ask("Enter new quantity: ", self._validator.positive_quantity)
                await portfolio.edit_asset(index, new_quantity, correlation_id)
                self._say("✅ Asset updated!")
            elif choice == "R":
                await portfolio.remove_asset(index, correlation_id)
                self._say("✅ Asset removed!")
            else:
                self._say("Invalid choice. Operation cancelled.")
        except IndexOutOfRangeError as e:
            self._say(f"❌ {e}")
        except PersistenceError as e:
            self._warn_save_failed(e)

    async def calculate_zakat(self) -> None:
        self._say()
        self._say("--- Zakat Calculation ---")
        portfolio = self._session.portfolio()
        if not portfolio.has_assets():
            self._say("You don't have any assets to calculate zakat for.")
            return

        correlation_id = create_correlation_id()
        report = await portfolio.zakat_report(correlation_id)
        symbol = self._session.settings.app.currency_symbol

        self._say("Asset Summary:")
        for line in report.lines:
            self._say(f"- {line.kind.value}: {self._money(line.value)}")
        self._say()
        self._say(f"Total Value: {self._money(report.total_value)}")
        self._say(f"Zakat Due ({report.rate:.1%}): {self._money(report.zakat_due)}")

        if not self._session.persistent:
            return
        answer = self._input("Export report to a text file? (Y/N): ").strip().upper()
        if answer != "Y":
            return
        reports_dir = self._session.settings.storage.data_dir / "reports"
        try:
            path = report.export(reports_dir, symbol)
        except OSError as e:
            self._say(f"❌ Could not write report: {e}")
            return
        await self._session.audit_logger.log_zakat_report_exported(
            username=report.username,
            path=str(path),
            correlation_id=correlation_id,
        )
        self._say(f"📄 Report saved to {path}")

    # ------------------------------------------------------------------
    # Bank actions
    # ------------------------------------------------------------------

    async def connect_bank(self) -> None:
        self._say()
        self._say("--- Connect Bank Account ---")
        v = self._validator
        bank_name = self._ask("Enter bank name: ", v.bank_name)
        card_number = self._ask("Enter card number (16 digits): ", v.card_number)
        otp = self._ask("Enter OTP (6 digits): ", v.otp)

        self._say("Verifying OTP with bank... (simulated)")
        try:
            account = await self._session.link_bank(
                bank_name,
                card_number,
                otp,
                correlation_id=create_correlation_id(),
            )
        except PersistenceError as e:
            self._warn_save_failed(e)
            return
        self._say(
            f"✅ Bank account linked successfully! "
            f"({account.bank_name}, card {account.masked_card_number})"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="investwise",
        description="Track a personal investment portfolio and its zakat.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for snapshots, logs and reports (default: INVESTWISE_STORAGE_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level for the log file (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--no-persist",
        action="store_true",
        help="Keep everything in memory; nothing is written to disk and zakat export is off",
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Apply command-line overrides on top of environment settings."""
    settings = get_settings()
    updates = {}
    if args.data_dir is not None:
        updates["storage"] = settings.storage.model_copy(update={"data_dir": args.data_dir})
    if args.log_level is not None:
        updates["app"] = settings.app.model_copy(update={"log_level": args.log_level})
    return settings.model_copy(update=updates) if updates else settings


async def _run(settings: Settings, persist: bool) -> int:
    session = await create_session(settings, persist=persist)
    return await ConsoleApp(session).run()


def main(argv: Optional[list[str]] = None) -> int:
    """Console entry point."""
    args = build_parser().parse_args(argv)

    checks = validate_all_settings()
    errors = {name: message for name, message in checks.items() if name.endswith("_error")}
    if errors:
        for name, message in errors.items():
            print(f"Invalid {name.removesuffix('_error')} settings: {message}", file=sys.stderr)
        return 2

    settings = resolve_settings(args)
    persist = not args.no_persist

    # Without persistence the log goes to stderr so the data dir stays untouched
    configure_logging(
        settings.app.log_level,
        settings.storage.data_dir / settings.app.log_file_name if persist else None,
    )

    try:
        return asyncio.run(_run(settings, persist=persist))
    except KeyboardInterrupt:
        # Every completed change is already on disk
        print("\nInterrupted.")
        return 130
    except Exception:
        logger.exception("unhandled_error")
        print("An unexpected error occurred. See the log file for details.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
