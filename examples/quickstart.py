"""domainir Quickstart Example.

Demonstrates the declare → register → seal → compile flow:
- Model declarations with fields, validation rules and relations
- A composite-key junction model
- Access policy and ownership rules
- Explicit bootstrap and schema compilation
- Reading the artifact the way collaborators do

Usage:
    python examples/quickstart.py
"""

from __future__ import annotations

from domainir import (
    AccessPolicy,
    DomainIRError,
    Field,
    LifecycleConfig,
    Model,
    Operation,
    OwnershipRule,
    Relation,
    bootstrap,
)


# =============================================================================
# Model Definitions (module "auth")
# =============================================================================

AuthUser = Model(
    name="AuthUser",
    module="auth",
    table_name="users",
    fields=[
        Field(name="id", type="integer", primary_key=True, auto_increment=True),
        Field(
            name="email",
            type="string",
            required=True,
            unique=True,
            validation=[{"type": "email"}, {"type": "maxLength", "value": 255}],
        ),
        Field(name="displayName", type="string", validation=[{"type": "minLength", "value": 2}]),
    ],
    relations=[
        Relation(
            name="userRoles",
            kind="hasMany",
            target="AuthUserRole",
            foreign_key="userId",
            inverse_side="user",
        ),
    ],
    access=AccessPolicy(read=["admin", "user"], create=["admin"], update=["admin", "user"]),
    ownership=OwnershipRule(field="id", operations=["update"]),
    config=LifecycleConfig(timestamps=True, soft_delete=True),
)

AuthRole = Model(
    name="AuthRole",
    module="auth",
    table_name="roles",
    fields=[
        Field(name="id", type="integer", primary_key=True, auto_increment=True),
        Field(name="name", type="string", required=True, unique=True),
    ],
    relations=[
        Relation(
            name="userRoles",
            kind="hasMany",
            target="AuthUserRole",
            foreign_key="roleId",
            inverse_side="role",
        ),
    ],
    access=AccessPolicy(read=["admin"], create=["admin"], delete=["admin"]),
)

AuthUserRole = Model(
    name="AuthUserRole",
    module="auth",
    table_name="user_roles",
    fields=[
        Field(name="userId", type="integer"),
        Field(name="roleId", type="integer"),
    ],
    primary_key=["userId", "roleId"],
    relations=[
        Relation(
            name="user",
            kind="belongsTo",
            target="AuthUser",
            foreign_key="userId",
            inverse_side="userRoles",
        ),
        Relation(
            name="role",
            kind="belongsTo",
            target="AuthRole",
            foreign_key="roleId",
            inverse_side="userRoles",
        ),
    ],
    access=AccessPolicy(read=["admin"], create=["admin"], delete=["admin"]),
)

# Declared in the "cms" module, ahead of the model it points at.
Article = Model(
    name="Article",
    module="cms",
    fields=[
        Field(name="id", type="integer", primary_key=True, auto_increment=True),
        Field(name="title", type="string", required=True, validation=[{"type": "maxLength", "value": 200}]),
        Field(name="body", type="text"),
        Field(name="authorId", type="integer", required=True),
    ],
    relations=[
        Relation(name="author", kind="belongsTo", target="AuthUser", foreign_key="authorId"),
    ],
    access=AccessPolicy(read=["user"], create=["user"], update=["user"], delete=["admin"]),
    ownership=OwnershipRule(field="authorId", auto_filter=True),
)


def register_cms(registry):
    registry.register(Article)


def register_auth(registry):
    registry.register_many([AuthUser, AuthRole, AuthUserRole])


# =============================================================================
# Main
# =============================================================================


def main():
    print("=" * 60)
    print("domainir Quickstart")
    print("=" * 60)

    # -------------------------------------------------------------------------
    # BOOTSTRAP
    # -------------------------------------------------------------------------
    print("\n1. Registering units...")
    context = bootstrap([register_cms, register_auth])
    for summary in context.registry.summaries():
        print(f"   {summary.module}.{summary.name} -> {summary.table}")

    # -------------------------------------------------------------------------
    # COMPILE
    # -------------------------------------------------------------------------
    print("\n2. Compiling...")
    try:
        schema = context.compile()
    except DomainIRError as e:
        print(f"   Failed: {e}")
        return
    print(f"   {len(schema.models)} model(s), fingerprint {schema.fingerprint[:12]}")
    for warning in schema.warnings:
        print(f"   warning [{warning.code}] {warning.model}: {warning.message}")

    # -------------------------------------------------------------------------
    # STORAGE VIEW
    # -------------------------------------------------------------------------
    print("\n3. Tables and keys...")
    for model in schema.storage_models():
        key = ", ".join(model.primary_key.fields)
        print(f"   {model.table}: ({key}) {list(model.field_names())}")

    # -------------------------------------------------------------------------
    # AUTHORIZATION VIEW
    # -------------------------------------------------------------------------
    print("\n4. Access checks...")
    article = schema.get("Article")
    for role in schema.roles:
        allowed = [op.value for op in Operation if article.access_policy.allows(op, role)]
        print(f"   Article / {role}: {allowed}")
    owner_filter = article.ownership_filter
    print(f"   Owner-filtered for user on update: {owner_filter.filters('update', 'user')}")
    print(f"   Owner-filtered for admin on update: {owner_filter.filters('update', 'admin')}")

    # -------------------------------------------------------------------------
    # VALIDATION VIEW
    # -------------------------------------------------------------------------
    print("\n5. Input shapes...")
    shape = context.input_shapes()["AuthUser"]
    print(f"   AuthUser requires: {shape.required_fields()}")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
