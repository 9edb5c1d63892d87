"""CLI entry point for the food tracker."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import mimetypes
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import TrackerConfig, load_config
from .db import InventoryDB, ShoppingListDB
from .gateway import create_gateway
from .inventory import InventoryStore, days_left, is_expired, is_near_expiry
from .models import (
    FoodStatus,
    ShoppingPriority,
    StorageType,
    UserPlan,
    UserProfile,
    utcnow,
)
from .shopping import ShoppingList
from .tracker import FoodTracker, OperationResult

_STORAGE_CHOICES = [s.name.lower() for s in StorageType]
_PRIORITY_CHOICES = [p.value for p in ShoppingPriority]


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="despensa",
        description="Controle de alimentos — registre compras e consumo, "
        "acompanhe validades e gere a lista de compras",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="caminho do arquivo de configuração (TOML)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="exibir logs detalhados"
    )

    sub = parser.add_subparsers(dest="command")

    # add
    add_parser = sub.add_parser("add", help="registrar alimentos (texto ou foto)")
    add_parser.add_argument("text", nargs="*", help="descrição da compra")
    add_parser.add_argument("--image", type=str, help="foto dos alimentos")
    add_parser.add_argument(
        "--storage",
        choices=_STORAGE_CHOICES,
        default=None,
        help="armazenar todos os itens neste local",
    )

    # consume
    consume_parser = sub.add_parser("consume", help="registrar consumo")
    consume_parser.add_argument("text", nargs="+", help="o que foi consumido")

    # spoil
    spoil_parser = sub.add_parser("spoil", help="marcar item como estragado")
    spoil_parser.add_argument("item_id", help="ID do item")

    # sweep
    sub.add_parser("sweep", help="marcar itens vencidos")

    # list
    list_parser = sub.add_parser("list", help="mostrar o estoque")
    list_parser.add_argument("--json", action="store_true", help="saída em JSON")

    # shopping
    shop_parser = sub.add_parser("shopping", help="lista de compras")
    shop_sub = shop_parser.add_subparsers(dest="shopping_command")
    shop_list = shop_sub.add_parser("list", help="mostrar a lista")
    shop_list.add_argument("--json", action="store_true", help="saída em JSON")
    shop_add = shop_sub.add_parser("add", help="adicionar item manualmente")
    shop_add.add_argument("name", nargs="+")
    for name, help_text in (("inc", "aumentar quantidade"), ("dec", "diminuir quantidade")):
        p = shop_sub.add_parser(name, help=help_text)
        p.add_argument("entry_id")
    shop_prio = shop_sub.add_parser("priority", help="alterar prioridade")
    shop_prio.add_argument("entry_id")
    shop_prio.add_argument("priority", choices=_PRIORITY_CHOICES)
    shop_rm = shop_sub.add_parser("remove", help="remover item")
    shop_rm.add_argument("entry_id")
    shop_clear = shop_sub.add_parser("clear", help="limpar toda a lista")
    shop_clear.add_argument("--yes", "-y", action="store_true", help="não pedir confirmação")

    # waste
    waste_parser = sub.add_parser("waste", help="relatório de desperdício")
    waste_parser.add_argument("--json", action="store_true", help="saída em JSON")

    # watch
    sub.add_parser("watch", help="verificar vencidos periodicamente")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    load_dotenv()
    config = load_config(args.config)
    tracker = _open_tracker(config)

    match args.command:
        case "add":
            ok = asyncio.run(_cmd_add(tracker, args))
        case "consume":
            ok = asyncio.run(_cmd_consume(tracker, args))
        case "spoil":
            ok = _cmd_spoil(tracker, args)
        case "sweep":
            ok = _cmd_sweep(tracker)
        case "list":
            ok = _cmd_list(tracker, args)
        case "shopping":
            ok = _cmd_shopping(tracker, args)
        case "waste":
            ok = _cmd_waste(tracker, args)
        case "watch":
            ok = _cmd_watch(tracker, config)

    _save_tracker(tracker, config)
    if not ok:
        sys.exit(1)


def _open_tracker(config: TrackerConfig) -> FoodTracker:
    inv_db = InventoryDB(config.database.path)
    shop_db = ShoppingListDB(config.database.path)
    try:
        inventory = InventoryStore(inv_db.load_all())
        shopping = ShoppingList(shop_db.load_all())
    finally:
        inv_db.close()
        shop_db.close()

    profile = UserProfile(
        name=config.profile.name,
        plan=UserPlan(config.profile.plan),
        alert_days_before=config.profile.alert_days_before,
    )
    tracker = FoodTracker(
        create_gateway(config),
        inventory,
        shopping,
        profile,
        gateway_timeout=config.gateway.timeout,
    )
    tracker.sweep()
    return tracker


def _save_tracker(tracker: FoodTracker, config: TrackerConfig) -> None:
    inv_db = InventoryDB(config.database.path)
    shop_db = ShoppingListDB(config.database.path)
    try:
        inv_db.save_all(tracker.inventory.items())
        shop_db.save_all(tracker.shopping.entries())
    finally:
        inv_db.close()
        shop_db.close()


def _report_failure(result: OperationResult) -> bool:
    if result.ok:
        return True
    print(f"⚠  {result.notice}", file=sys.stderr)
    return False


async def _cmd_add(tracker: FoodTracker, args) -> bool:
    storage = StorageType.parse(args.storage) if args.storage else None

    print("🔍 Identificando alimentos...")
    if args.image:
        path = Path(args.image)
        mime_type = mimetypes.guess_type(str(path))[0] or "image/jpeg"
        result = await tracker.register_image(
            path.read_bytes(), mime_type=mime_type, storage=storage
        )
    else:
        result = await tracker.register_text(" ".join(args.text), storage=storage)

    if not _report_failure(result):
        return False
    if not result.items:
        print("Nenhum alimento identificado.")
        return True

    print(f"\n🥬 {len(result.items)} item(ns) registrado(s):")
    for item in result.items:
        print(
            f"  {item.name:<20} {item.current_quantity:g} {item.unit}"
            f"  [{item.storage_type.value}]  vence {item.expiry_date:%d/%m/%Y}"
        )
    return True


async def _cmd_consume(tracker: FoodTracker, args) -> bool:
    print("🔍 Interpretando consumo...")
    result = await tracker.consume_text(" ".join(args.text))
    if not _report_failure(result):
        return False
    for item in result.items:
        print(f"  ✔ {item.name} acabou")
    for entry in result.shopping_entries:
        print(f"  🛒 {entry.name} adicionado à lista de compras")
    print("Consumo registrado.")
    return True


def _cmd_spoil(tracker: FoodTracker, args) -> bool:
    item = tracker.mark_spoiled(_resolve_item(tracker, args.item_id))
    if item is not None:
        print(f"{item.name} marcado como estragado.")
    return True


def _cmd_sweep(tracker: FoodTracker) -> bool:
    # Opening the tracker already swept; report what is expired now.
    expired = [i for i in tracker.visible_items() if i.status is FoodStatus.EXPIRED]
    print(f"{len(expired)} item(ns) vencido(s) no estoque.")
    return True


def _cmd_list(tracker: FoodTracker, args) -> bool:
    items = tracker.visible_items()

    if args.json:
        print(json.dumps([i.to_dict() for i in items], ensure_ascii=False, indent=2))
        return True

    if not items:
        print("Seu estoque está vazio.")
        return True

    now = utcnow()
    alert = tracker.profile.alert_days_before
    for item in sorted(items, key=lambda i: i.expiry_date):
        left = days_left(item, now)
        if is_expired(item, now):
            label = "Vencido"
        elif left == 1:
            label = "Vence amanhã"
        else:
            label = f"Vence em {left} dias"
        mark = "⚠ " if is_near_expiry(item, now, alert) else "  "
        print(
            f"{mark}{item.id[:8]}  {item.name:<20} "
            f"{item.current_quantity:g}/{item.initial_quantity:g} {item.unit}"
            f"  [{item.storage_type.value}]  {label}"
        )
    return True


def _cmd_shopping(tracker: FoodTracker, args) -> bool:
    match args.shopping_command:
        case "add":
            tracker.add_shopping_item(" ".join(args.name))
        case "inc":
            tracker.adjust_shopping_quantity(_resolve_entry(tracker, args.entry_id), 1)
        case "dec":
            tracker.adjust_shopping_quantity(_resolve_entry(tracker, args.entry_id), -1)
        case "priority":
            tracker.set_shopping_priority(
                _resolve_entry(tracker, args.entry_id), ShoppingPriority(args.priority)
            )
        case "remove":
            tracker.remove_shopping_item(_resolve_entry(tracker, args.entry_id))
        case "clear":
            if args.yes or _confirm(
                "Tem certeza que deseja limpar toda a lista de compras?"
            ):
                tracker.clear_shopping_list()
            return True

    entries = tracker.shopping.entries()
    if getattr(args, "json", False):
        print(json.dumps([e.to_dict() for e in entries], ensure_ascii=False, indent=2))
        return True
    if not entries:
        print("Sua lista de compras está vazia.")
        return True
    for e in entries:
        print(
            f"{e.id[:8]}  {e.name:<20} {e.suggested_quantity} {e.unit:<10}"
            f" {e.priority.value:<8} ({e.reason.value})"
        )
    return True


def _resolve_item(tracker: FoodTracker, prefix: str) -> str:
    """Expand a shortened id as printed by ``list``."""
    matches = [i.id for i in tracker.inventory.items() if i.id.startswith(prefix)]
    return matches[0] if len(matches) == 1 else prefix


def _resolve_entry(tracker: FoodTracker, prefix: str) -> str:
    """Expand a shortened id as printed by ``shopping list``."""
    matches = [e.id for e in tracker.shopping.entries() if e.id.startswith(prefix)]
    return matches[0] if len(matches) == 1 else prefix


def _confirm(question: str) -> bool:
    answer = input(f"{question} [s/N] ").strip().lower()
    return answer in ("s", "sim", "y", "yes")


def _cmd_waste(tracker: FoodTracker, args) -> bool:
    summary = tracker.waste_summary()

    if args.json:
        data = {
            "total_value": summary.total_value,
            "by_item": [{"name": n, "value": v} for n, v in summary.by_item],
            "consumed_count": summary.consumed_count,
        }
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return True

    print(f"Desperdício total: R$ {summary.total_value:.2f}")
    print(f"Itens consumidos:  {summary.consumed_count}")
    if summary.by_item:
        print("\nPor item:")
        for name, value in summary.by_item:
            print(f"  {name:<20} R$ {value:.2f}")
    return True


def _cmd_watch(tracker: FoodTracker, config: TrackerConfig) -> bool:
    from .scheduler import ExpirySweepScheduler

    async def run() -> None:
        scheduler = ExpirySweepScheduler(
            tracker, config, on_swept=lambda t: _save_tracker(t, config)
        )
        scheduler.start()
        print("⏱  Verificação de vencidos ativa (Ctrl+C para sair)")
        try:
            await asyncio.Event().wait()
        finally:
            scheduler.stop()

    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        pass
    return True
