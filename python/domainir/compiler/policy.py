"""Access policy compilation.

Turns a model's AccessPolicy and optional OwnershipRule into:

    CompiledPolicy   every operation × every role → allow/deny
    OwnershipFilter  owner field, operations it applies to, bypass roles

The table is closed-world: an operation a policy does not list is denied to
every role, and roles outside the role universe are denied everything.
Nothing is enforced here; the authorization collaborator interprets the
table and the filter descriptor.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from domainir.compiler.artifact import CompiledPolicy, CompileWarning, OwnershipFilter
from domainir.core.types import OPERATIONS
from domainir.models.base import Model


def collect_roles(
    models: Sequence[Model],
    *,
    extra_roles: Iterable[str] = (),
    admin_role: str = "admin",
) -> tuple[str, ...]:
    """Sorted union of every role named by any model, plus extra roles.

    The admin role joins the universe as soon as one ownership rule lets it
    bypass the owner filter.
    """
    roles: set[str] = set(extra_roles)
    for model in models:
        roles.update(model.access.roles())
        if model.ownership is not None and model.ownership.admin_bypass:
            roles.add(admin_role)
    return tuple(sorted(roles))


def compile_policy(
    model: Model,
    roles: Sequence[str],
    *,
    admin_role: str = "admin",
) -> tuple[CompiledPolicy, OwnershipFilter | None]:
    """Build the policy table and ownership filter of one model."""
    table: dict[str, dict[str, bool]] = {}
    for operation in OPERATIONS:
        granted = set(model.access.roles_for(operation))
        table[operation.value] = {role: role in granted for role in roles}

    policy = CompiledPolicy(roles=tuple(roles), table=table)

    ownership = model.ownership
    if ownership is None:
        return policy, None

    listed = set(ownership.operations)
    owner_filter = OwnershipFilter(
        owner_field=ownership.field,
        auto_filter=ownership.auto_filter,
        applies_to=tuple(op for op in OPERATIONS if op in listed),
        admin_bypass=ownership.admin_bypass,
        bypass_roles=(admin_role,) if ownership.admin_bypass else (),
    )
    return policy, owner_filter


def policy_warnings(model: Model) -> list[CompileWarning]:
    """Advisory findings: operations no role may perform."""
    closed = [op.value for op in OPERATIONS if not model.access.roles_for(op)]
    if not closed:
        return []
    return [
        CompileWarning(
            code="closed_operations",
            model=model.name,
            message=f"no role may perform: {', '.join(closed)}",
        )
    ]


__all__ = ["collect_roles", "compile_policy", "policy_warnings"]
