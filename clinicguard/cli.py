"""
Interactive CLI for inspecting what a principal may do.
Log in as a user id, then ask capability, view and clinic questions.
"""

from clinicguard.context import resolve_context
from clinicguard.database import init_engine
from clinicguard.errors import AuthorizationError
from clinicguard.isolation import authorize_tenant_access
from clinicguard.permissions import has_capability, list_capabilities
from clinicguard.roles import normalize_role
from clinicguard.store import SqlTenantStore
from clinicguard.views import accessible_views, authorize_view, default_view_for

HELP = (
    "Commands:\n"
    "  can <capability>   e.g. can patient.edit\n"
    "  view <view>        e.g. view lab-work\n"
    "  tenant <id>        may this user touch clinic <id>?\n"
    "  caps               list granted capabilities\n"
    "  views              list enterable views\n"
    "  quit"
)


def _verdict(decision) -> str:
    return "ALLOW" if decision.allowed else f"DENY ({decision.reason})"


def handle_command(user, tenant, line: str) -> str:
    """Evaluate one REPL command for *user* and return the text to print."""
    parts = line.split(None, 1)
    if not parts:
        return ""
    cmd = parts[0].lower()
    arg = parts[1].strip() if len(parts) > 1 else ""

    if cmd == "can" and arg:
        try:
            return "ALLOW" if has_capability(user.role, arg) else "DENY (missing capability)"
        except AuthorizationError as e:
            return f"[CONFIG ERROR] {e}"
    if cmd == "view" and arg:
        return _verdict(authorize_view(user, tenant, arg))
    if cmd == "tenant" and arg:
        return _verdict(authorize_tenant_access(user, arg))
    if cmd == "caps":
        caps = sorted(list_capabilities(user.role))
        return "\n".join(caps) if caps else "(no capabilities)"
    if cmd == "views":
        views = accessible_views(user.role)
        return "\n".join(views) if views else "(no views)"
    return HELP


def main():
    print("=== Clinic Authorization: principal inspector ===\n")

    store = SqlTenantStore(init_engine())

    # ── Login ────────────────────────────────────────────────────────
    try:
        principal_id = input("Enter user id (or 'quit'): ").strip()
    except (EOFError, KeyboardInterrupt):
        print("\nExiting.")
        return

    if not principal_id or principal_id.lower() in {"quit", "exit"}:
        print("Goodbye.")
        return

    try:
        user, tenant = resolve_context(store, principal_id)
    except AuthorizationError as e:
        print("\n[ERROR] Lookup failed.")
        print("Details:", e)
        return

    role = normalize_role(user.role)
    print(f"\n[auth] User {user.id} (role={role}, raw={user.role!r})")
    print(f"[auth] Clinic: {tenant.name + ' [' + tenant.status + ']' if tenant else '(none)'}")
    print(f"[auth] Landing view: {default_view_for(role)}")
    print(HELP)

    # ── REPL ─────────────────────────────────────────────────────────
    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nExiting.")
            break

        if not line:
            continue
        if line.lower() in {"quit", "exit"}:
            print("Goodbye.")
            break

        print(handle_command(user, tenant, line))


if __name__ == "__main__":
    main()
