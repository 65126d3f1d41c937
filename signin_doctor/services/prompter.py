"""Interactive collection of the inputs for one diagnostic run."""

import logging
from pathlib import Path

from rich.console import Console
from rich.prompt import Confirm, Prompt

from signin_doctor.models.schemas import ProductionKeystoreInput, RunConfiguration

logger = logging.getLogger(__name__)


class Prompter:
    """Asks for the production keystore and the installed app's package name.

    Anything already present in ``defaults`` (typically from the command
    line) is kept and not asked again.
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def collect(self, defaults: RunConfiguration, device_count: int) -> RunConfiguration:
        production = defaults.production
        if production is None:
            production = self._ask_production()
        elif not production.store_password:
            production = production.model_copy(update=self._ask_passwords())

        package_name = defaults.package_name
        if package_name is None:
            package_name = self._ask_package(device_count)

        return RunConfiguration(production=production, package_name=package_name)

    def _ask_production(self) -> ProductionKeystoreInput | None:
        self.console.rule("[bold]Production Keystore")
        if not Confirm.ask("Do you have a production/release keystore?", console=self.console, default=False):
            self.console.print("[yellow]⚠ Skipping production keystore[/yellow]")
            return None

        path = Prompt.ask("Enter the full path to your production keystore", console=self.console, default="")
        if not path.strip():
            return None

        alias = Prompt.ask("Enter keystore alias", console=self.console, default="production")
        return ProductionKeystoreInput(path=Path(path.strip()).expanduser(), alias=alias, **self._ask_passwords())

    def _ask_passwords(self) -> dict:
        store_password = Prompt.ask("Enter keystore password", console=self.console, password=True, default="")
        key_password = Prompt.ask(
            "Enter key password (press Enter if same as keystore password)",
            console=self.console,
            password=True,
            default="",
        )
        return {"store_password": store_password, "key_password": key_password or None}

    def _ask_package(self, device_count: int) -> str | None:
        self.console.rule("[bold]Installed APK (Optional)")
        if device_count == 0:
            self.console.print("[yellow]⚠ No device connected, skipping APK extraction[/yellow]")
            return None

        if not Confirm.ask(
            "Do you want to extract fingerprints from an installed APK?", console=self.console, default=False
        ):
            return None

        package_name = Prompt.ask(
            "Enter your app's package name (e.g. com.titanium.app)", console=self.console, default=""
        ).strip()
        if package_name:
            self.console.print("[yellow]Note: APK extraction may take 30-60 seconds for large apps.[/yellow]")
        return package_name or None
