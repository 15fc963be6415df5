from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from carservice.constants import format_payment_method
from carservice.errors import NotFoundError
from carservice.models import format_thb
from carservice.models.bill import Bill
from carservice.services.bill_service import BillService

console = Console()

_LINE_ITEM_SLOTS = (1, 2, 3, 4)


def _show_bill_detail(bill: Bill) -> None:
    """Display a bill's line items, taxes and total."""
    detail_table = Table()
    detail_table.add_column("Item")
    detail_table.add_column("Amount", justify="right")
    detail_table.add_column("Tax", justify="right")
    detail_table.add_column("Pass-through tax", justify="right", style="dim")

    for slot in _LINE_ITEM_SLOTS:
        name = getattr(bill, f"name{slot}")
        amount = bill.amount1 if slot == 1 else getattr(bill, f"amount{slot}")
        if not name and amount is None:
            continue
        tax = getattr(bill, f"tax{slot}")
        taxgo = getattr(bill, f"taxgo{slot}")
        detail_table.add_row(
            name or "-",
            format_thb(amount) if amount is not None else "-",
            format_thb(tax) if tax is not None else "-",
            format_thb(taxgo) if taxgo is not None else "-",
        )

    console.print(detail_table)
    console.print(f"  [bold]Total: {format_thb(bill.total)}[/bold]")
    console.print(f"  Payment: {format_payment_method(bill.payment_method)}")
    if bill.username or bill.phone:
        console.print(f"  Customer: {bill.username or '-'} {bill.phone}".rstrip())
    registrations = [getattr(bill, f"car_registration{slot}") for slot in _LINE_ITEM_SLOTS]
    registrations = [r for r in registrations if r]
    if registrations:
        console.print(f"  Registrations: {', '.join(registrations)}")
    if bill.description:
        console.print(f"  Description: {bill.description}")
    console.print(f"  [dim]Created by {bill.created_by or '-'}[/dim]")


def list_bills_menu(bill_service: BillService) -> None:
    bills = bill_service.list_bills()

    if not bills:
        console.print("[yellow]No bills issued yet.[/yellow]")
        return

    table = Table(title="Bills")
    table.add_column("#", style="dim")
    table.add_column("Number")
    table.add_column("Customer")
    table.add_column("Total", justify="right")
    table.add_column("Created", style="dim")

    for b in bills:
        table.add_row(
            str(b.id),
            b.bill_number,
            b.username or "-",
            format_thb(b.total),
            b.created_at.strftime("%d/%m/%Y %H:%M") if b.created_at else "-",
        )

    console.print()
    console.print(table)

    bill_choices = {f"{b.bill_number} - {b.username or 'no customer'}": b for b in bills}
    choices = list(bill_choices.keys()) + ["Back"]
    choice = questionary.select("Select a bill:", choices=choices).ask()

    if choice is None or choice == "Back":
        return

    selected = bill_choices[choice]
    if selected.id is None:
        console.print("[red]Invalid bill.[/red]")
        return
    try:
        bill = bill_service.get_bill(selected.id)
    except NotFoundError:
        console.print("[red]Bill not found.[/red]")
        return

    _bill_detail_menu(bill, bill_service)


def _bill_detail_menu(bill: Bill, bill_service: BillService) -> None:
    while True:
        console.print()
        console.print(f"[bold cyan]Bill {bill.bill_number}[/bold cyan]")
        _show_bill_detail(bill)
        console.print()

        action = questionary.select("Actions:", choices=["Delete Bill", "Back"]).ask()

        if action is None or action == "Back":
            break
        elif action == "Delete Bill":
            confirm = questionary.confirm(f"Delete bill {bill.bill_number}?", default=False).ask()
            if confirm:
                if bill.id is None:
                    console.print("[red]Invalid bill.[/red]")
                    break
                try:
                    bill_service.delete_bill(bill.id)
                except NotFoundError:
                    console.print("[yellow]Bill was already deleted.[/yellow]")
                    break
                console.print("[green]Bill deleted.[/green]")
                break
