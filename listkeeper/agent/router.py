"""Intent router: decides what one inbound message means and answers it.

Stages run strictly in order and the first one that applies wins:

1. broadcast / empty messages are dropped
2. activation and deactivation commands
3. group chats that were never activated are ignored (no reply)
4. the group's context is resolved (domain detection on the first
   non-command message)
5. reserved commands (help, status, clear, type, list, watched)
6. everything else goes to the domain's list operation
"""

from __future__ import annotations

from enum import Enum as PyEnum

from loguru import logger

from listkeeper.bus.events import InboundMessage
from listkeeper.errors import InputRejected
from listkeeper.lists import formatter
from listkeeper.lists.models import DomainType, GroupContext
from listkeeper.lists.operations import ListOperations
from listkeeper.lists.store import ListStore

ONBOARDING = (
    "✅ Bot ativado neste grupo!\n\n"
    "Envie a primeira mensagem e eu descubro o tipo da lista:\n"
    "🎬 filmes, séries e livros\n"
    "💰 gastos com valores\n"
    "🛒 itens de compras\n\n"
    "Digite !ajuda para ver os comandos."
)
DEACTIVATED = "👋 Bot desativado neste grupo. Digite !ativar para reativar."
TYPE_HINT = "📊 Tipos válidos: entretenimento, gastos, compras. Ex: '!tipo gastos'"
WATCHED_ONLY_ENTERTAINMENT = "ℹ️ !visto só funciona em grupos de entretenimento."


class Command(str, PyEnum):
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    HELP = "help"
    STATUS = "status"
    CLEAR = "clear"
    TYPE = "type"
    LIST = "list"
    WATCHED = "watched"


_COMMANDS: dict[str, Command] = {
    "!ativar": Command.ACTIVATE,
    "!activate": Command.ACTIVATE,
    "!desativar": Command.DEACTIVATE,
    "!deactivate": Command.DEACTIVATE,
    "!ajuda": Command.HELP,
    "!help": Command.HELP,
    "!status": Command.STATUS,
    "!limpar": Command.CLEAR,
    "!clear": Command.CLEAR,
    "!tipo": Command.TYPE,
    "!info": Command.TYPE,
    "!type": Command.TYPE,
    "!lista": Command.LIST,
    "!list": Command.LIST,
    "!visto": Command.WATCHED,
    "!watched": Command.WATCHED,
}

# Commands that take a free-text argument; all others must match exactly.
_ARG_COMMANDS = frozenset({Command.TYPE, Command.WATCHED})


def parse_command(text: str) -> tuple[Command, str] | None:
    """Recognize a reserved command (case-insensitive, surrounding space ignored)."""
    parts = text.strip().split(maxsplit=1)
    if not parts:
        return None
    command = _COMMANDS.get(parts[0].lower())
    if command is None:
        return None
    arg = parts[1].strip() if len(parts) > 1 else ""
    if arg and command not in _ARG_COMMANDS:
        return None
    return command, arg


class IntentRouter:
    def __init__(
        self,
        store: ListStore,
        operations: ListOperations,
        require_activation: bool = True,
    ) -> None:
        self.store = store
        self.operations = operations
        self.require_activation = require_activation

    async def handle(self, msg: InboundMessage) -> str | None:
        """Process one message. ``None`` means: send nothing back."""
        text = (msg.content or "").strip()
        if msg.is_broadcast or not text:
            return None

        key = msg.session_key
        parsed = parse_command(text)
        command, arg = parsed if parsed else (None, "")

        if command is Command.ACTIVATE:
            self.store.authorize(key)
            return ONBOARDING
        if command is Command.DEACTIVATE:
            self.store.revoke(key)
            return DEACTIVATED

        if msg.is_group and self.require_activation and not self.store.is_authorized(key):
            logger.debug(f"Ignoring message from inactive group {key}")
            return None

        logger.info(f"💬 {msg.sender_name or msg.sender_id} @ {key}: {text[:80]}")

        async with self.store.lock(key):
            # commands never decide the domain
            ctx = await self.store.get_or_create(key, None if command else text)
            try:
                if command is not None:
                    return await self._run_command(ctx, command, arg)
                return await self.operations.dispatch(ctx, text, msg.sender_name)
            except InputRejected as exc:
                return exc.hint

    async def _run_command(self, ctx: GroupContext, command: Command, arg: str) -> str:
        currency = self.operations.currency

        if command is Command.HELP:
            return formatter.help_message(ctx.domain_type)
        if command is Command.STATUS:
            return formatter.status_line(ctx, currency)
        if command is Command.CLEAR:
            removed = self.store.clear(ctx.group_id)
            return f"🗑️ Lista limpa! {removed} itens removidos."
        if command is Command.TYPE:
            if not arg:
                return formatter.type_line(ctx)
            domain_type = DomainType.parse(arg)
            if domain_type is None or domain_type is DomainType.UNDETERMINED:
                raise InputRejected(TYPE_HINT)
            self.store.set_type(ctx.group_id, domain_type)
            return f"✅ Tipo do grupo alterado para: *{domain_type.label}*"
        if command is Command.LIST:
            insight = await self.operations.expense_insight(ctx)
            return self.store.summarize(ctx.group_id, currency, insight)
        if command is Command.WATCHED:
            if ctx.domain_type is not DomainType.ENTERTAINMENT:
                return WATCHED_ONLY_ENTERTAINMENT
            return self.operations.mark_watched(ctx, arg)
        raise ValueError(f"unhandled command: {command}")
