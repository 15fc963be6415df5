import questionary
from rich.console import Console

from carservice.cli.bill_menu import list_bills_menu
from carservice.repositories.factory import get_bill_repository
from carservice.security import create_access_token
from carservice.services.bill_service import BillService
from carservice.settings import settings

console = Console()


def _build_services() -> BillService:
    return BillService(get_bill_repository())


def issue_token_menu() -> None:
    if settings.jwt_secret_is_ephemeral:
        # A per-process key means the API server could never verify the token.
        console.print("[red]CARSERVICE_JWT_SECRET is not set, refusing to issue a token.[/red]")
        console.print("Set the same CARSERVICE_JWT_SECRET for this CLI and the API server.")
        return
    identity = questionary.text("Identity to embed in the token (user id):").ask()
    if not identity or not identity.strip():
        console.print("[red]Identity is required.[/red]")
        return
    token = create_access_token(identity.strip())
    console.print()
    console.print("[green bold]Access token issued:[/green bold]")
    console.print(token, soft_wrap=True)


def main_menu() -> None:
    bill_service = _build_services()

    console.print()
    console.print("[bold]Car Service Billing[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "List Bills",
                "Issue API Token",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Goodbye![/bold]")
            break
        elif choice == "List Bills":
            list_bills_menu(bill_service)
        elif choice == "Issue API Token":
            issue_token_menu()
