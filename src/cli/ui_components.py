"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from core.domain.common import Page
from core.domain.parcels import Parcel, ParcelTrackingInfo
from core.domain.permissions import Principal
from core.services.navigation import NavigationView, NavItem


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (JSON/pipelines).
    """

    title = Text("colisdesk", style="bold cyan")
    subtitle = Text("Back-office logístico • Colis • Facturación • Ajustes", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_parcels_table(page: Page[Parcel]) -> Table:
    p = page.pagination
    table = Table(title=f"Colis (page {p.page}/{max(p.total_pages, 1)}, total {p.total})")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Recipient", style="white")
    table.add_column("Phone", style="white")
    table.add_column("Status", style="magenta")
    table.add_column("Payment", style="green")
    table.add_column("Price", justify="right")
    for parcel in page.items:
        table.add_row(
            parcel.code,
            parcel.recipient_name,
            parcel.recipient_phone,
            parcel.parcel_status_code or "-",
            parcel.payment_status,
            f"{parcel.price:.2f}",
        )
    return table


def build_tracking_panel(info: ParcelTrackingInfo) -> Panel:
    body = Text()
    body.append(f"{info.status_name or info.status}\n", style="bold")
    if info.recipient_name:
        body.append(f"Destinataire: {info.recipient_name}\n")
    if info.destination_city:
        body.append(f"Ville: {info.destination_city}\n")
    if info.delivered_at:
        body.append(f"Livré le: {info.delivered_at:%Y-%m-%d %H:%M}\n", style="green")
    if info.history:
        body.append("\nHistorique:\n", style="bold")
        for event in info.history:
            when = f"{event.changed_at:%Y-%m-%d %H:%M}" if event.changed_at else "?"
            line = f"- {when}  {event.status_name or event.status_code}"
            if event.comment:
                line += f" ({event.comment})"
            body.append(line + "\n")
    return Panel(body, title=Text(info.code, style="bold cyan"), border_style="cyan")


def _add_nav_items(node: Tree, items: Sequence[NavItem]) -> None:
    for item in items:
        label = Text(item.label, style="bold green" if item.active else "white")
        label.append(f"  {item.href}", style="dim")
        if item.badge is not None:
            label.append(f" [{item.badge}]", style="yellow")
        branch = node.add(label)
        if item.children:
            _add_nav_items(branch, item.children)


def build_nav_tree(view: NavigationView, title: str = "Navigation") -> Tree:
    tree = Tree(Text(title, style="bold cyan"))
    for group in view.groups:
        _add_nav_items(tree.add(Text(group.label, style="bold")), group.items)
    return tree


def build_principal_panel(principal: Principal, info: dict[str, Any]) -> Panel:
    body = Text()
    body.append(f"{principal.name or principal.email or principal.user_id}\n", style="bold")
    if principal.email:
        body.append(f"Email: {principal.email}\n")
    body.append(f"Type: {principal.user_type or '-'}    Rôle: {principal.role_name or '-'}\n")
    body.append(f"Tenant: {info.get('tenant_id') or principal.tenant_id or '-'}\n")
    if info.get("expires_at"):
        body.append(f"Expire: {info['expires_at']}\n", style="dim")
    body.append(f"Permissions: {len(principal.permissions)}", style="dim")
    style = "green" if info.get("is_authenticated") else "yellow"
    return Panel(body, title=Text("Session", style=f"bold {style}"), border_style=style)


def build_sms_preview_panel(
    preview: str,
    placeholders: Sequence[str],
    segments: int,
    problems: Sequence[str],
) -> Panel:
    body = Text()
    body.append(preview + "\n\n")
    body.append(f"{len(preview)} caractères • {segments} SMS\n", style="dim")
    if placeholders:
        body.append("Placeholders: " + ", ".join(placeholders) + "\n", style="cyan")
    for problem in problems:
        body.append(f"! {problem}\n", style="red")
    border = "red" if problems else "green"
    return Panel(body, title=Text("Aperçu SMS", style="bold"), border_style=border)
