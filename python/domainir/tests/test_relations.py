"""Tests for relation resolution and the relation graph."""

from __future__ import annotations

import pytest

from domainir.compiler import SchemaCompiler, resolve_relations
from domainir.config import DomainIRSettings
from domainir.core.types import RelationKind
from domainir.exceptions import (
    DanglingForeignKeyError,
    DanglingRelationError,
    InverseRelationError,
    SchemaCompileError,
)
from domainir.models import Field, Model, ModelRegistry, Relation


def _id() -> Field:
    return Field(name="id", type="integer", primary_key=True, auto_increment=True)


def _user(*relations: Relation) -> Model:
    return Model(name="User", fields=[_id()], relations=list(relations))


def _post(*relations: Relation, fk: str = "authorId") -> Model:
    return Model(
        name="Post",
        fields=[_id(), Field(name=fk, type="integer", required=True)],
        relations=list(relations),
    )


AUTHOR = Relation(
    name="author", kind="belongsTo", target="User", foreign_key="authorId", inverse_side="posts"
)
POSTS = Relation(
    name="posts", kind="hasMany", target="Post", foreign_key="authorId", inverse_side="author"
)


class TestDanglingReferences:
    """Test unknown targets and missing foreign keys."""

    def test_consistent_pair_resolves(self):
        """Test a belongsTo/hasMany pair resolves without findings."""
        result = resolve_relations([_user(POSTS), _post(AUTHOR)])
        assert result.ok
        assert result.errors == []
        assert [w.code for w in result.warnings] == []
        assert len(result.graph.edges) == 2

    def test_unknown_target(self):
        """Test a relation to an unregistered model is a dangling relation."""
        post = _post(
            Relation(name="author", kind="belongsTo", target="Ghost", foreign_key="authorId")
        )
        result = resolve_relations([post])
        assert not result.ok
        (error,) = result.errors
        assert isinstance(error, DanglingRelationError)
        assert error.model == "Post"
        assert error.relation == "author"
        assert error.target == "Ghost"
        assert result.graph.edges == ()

    def test_belongs_to_foreign_key_missing(self):
        """Test belongsTo checks its foreign key on the declaring model."""
        bar = Model(
            name="Bar",
            fields=[_id()],
            relations=[Relation(name="foo", kind="belongsTo", target="Foo", foreign_key="fooId")],
        )
        foo = Model(name="Foo", fields=[_id()])
        (error,) = resolve_relations([foo, bar]).errors
        assert isinstance(error, DanglingForeignKeyError)
        assert error.model == "Bar"
        assert error.field == "fooId"
        assert error.owner == "Bar"

    def test_unknown_target_and_missing_foreign_key(self):
        """Test a belongsTo to an unknown model still reports its missing foreign key."""
        bar = Model(
            name="Bar",
            fields=[_id()],
            relations=[
                Relation(name="ghost", kind="belongsTo", target="Ghost", foreign_key="fooId")
            ],
        )
        errors = resolve_relations([bar]).errors
        assert len(errors) == 2
        dangling_fk = next(e for e in errors if isinstance(e, DanglingForeignKeyError))
        assert dangling_fk.field == "fooId"
        assert dangling_fk.owner == "Bar"
        assert any(isinstance(e, DanglingRelationError) for e in errors)

    def test_unknown_target_and_missing_foreign_key_at_compile(self):
        """Test compilation carries both errors for the same relation."""
        registry = ModelRegistry()
        registry.register(
            Model(
                name="Bar",
                fields=[_id()],
                relations=[
                    Relation(name="ghost", kind="belongsTo", target="Ghost", foreign_key="fooId")
                ],
            )
        )
        registry.seal()

        with pytest.raises(SchemaCompileError) as exc_info:
            SchemaCompiler(registry, DomainIRSettings()).compile()
        kinds = {type(e) for e in exc_info.value.errors}
        assert kinds == {DanglingForeignKeyError, DanglingRelationError}

    def test_has_many_foreign_key_checked_on_target(self):
        """Test hasMany checks its foreign key on the target model."""
        user = _user(Relation(name="posts", kind="hasMany", target="Post", foreign_key="writerId"))
        (error,) = resolve_relations([user, _post()]).errors
        assert isinstance(error, DanglingForeignKeyError)
        assert error.model == "User"
        assert error.field == "writerId"
        assert error.owner == "Post"

    def test_all_errors_collected(self):
        """Test every problem is reported, not only the first."""
        post = _post(
            Relation(name="author", kind="belongsTo", target="User", foreign_key="userId"),
            Relation(name="blog", kind="belongsTo", target="Blog", foreign_key="authorId"),
        )
        comment = Model(
            name="Comment",
            fields=[_id()],
            relations=[Relation(name="post", kind="belongsTo", target="Post", foreign_key="postId")],
        )
        errors = resolve_relations([_user(), post, comment]).errors
        assert len(errors) == 3
        assert {type(e) for e in errors} == {DanglingForeignKeyError, DanglingRelationError}

    def test_dangling_foreign_key_fails_compile_not_registration(self):
        """Test a missing foreign key registers fine and fails at compile time."""
        registry = ModelRegistry()
        registry.register(Model(name="Foo", fields=[_id()]))
        registry.register(
            Model(
                name="Bar",
                fields=[_id()],
                relations=[
                    Relation(name="foo", kind="belongsTo", target="Foo", foreign_key="fooId")
                ],
            )
        )
        registry.seal()

        with pytest.raises(SchemaCompileError) as exc_info:
            SchemaCompiler(registry, DomainIRSettings()).compile()
        (error,) = exc_info.value.errors
        assert isinstance(error, DanglingForeignKeyError)
        assert error.model == "Bar"
        assert error.field == "fooId"


class TestInverseSide:
    """Test inverseSide consistency checks."""

    def test_missing_inverse_is_error_when_strict(self):
        """Test an inverseSide naming nothing is fatal in strict mode."""
        author = AUTHOR.model_copy(update={"inverse_side": "articles"})
        (error,) = resolve_relations([_user(POSTS), _post(author)]).errors
        assert isinstance(error, InverseRelationError)
        assert error.model == "Post"
        assert error.inverse == "articles"

    def test_missing_inverse_is_warning_when_lenient(self):
        """Test the same problem is advisory when strict mode is off."""
        author = AUTHOR.model_copy(update={"inverse_side": "articles"})
        result = resolve_relations([_user(POSTS), _post(author)], strict_inverse=False)
        assert result.ok
        assert [w.code for w in result.warnings] == ["inverse_mismatch"]
        assert result.warnings[0].model == "Post"

    def test_inverse_kind_mismatch(self):
        """Test belongsTo must pair with hasMany."""
        user = _user(
            Relation(
                name="posts",
                kind="belongsTo",
                target="Post",
                foreign_key="id",
                inverse_side="author",
            )
        )
        errors = resolve_relations([user, _post(AUTHOR)]).errors
        assert len(errors) == 2
        assert all(isinstance(e, InverseRelationError) for e in errors)
        assert "must pair with" in errors[0].reason

    def test_inverse_pointing_elsewhere(self):
        """Test the inverse relation must target the declaring model."""
        tag = Model(
            name="Tag",
            fields=[_id()],
            relations=[Relation(name="author", kind="belongsTo", target="Post", foreign_key="id")],
        )
        user = _user(
            Relation(
                name="posts", kind="hasMany", target="Tag", foreign_key="id", inverse_side="author"
            )
        )
        post = _post(
            Relation(name="author", kind="belongsTo", target="User", foreign_key="authorId")
        )
        errors = resolve_relations([user, post, tag]).errors
        assert len(errors) == 1
        assert "instead of 'User'" in errors[0].reason

    def test_foreign_keys_disagree(self):
        """Test both sides must agree on the foreign key."""
        posts = POSTS.model_copy(update={"foreign_key": "id"})
        errors = resolve_relations([_user(posts), _post(AUTHOR)]).errors
        assert any(
            isinstance(e, InverseRelationError) and "disagree" in e.reason for e in errors
        )

    def test_has_many_without_counterpart_warns(self):
        """Test a hasMany nobody points back to is advisory."""
        user = _user(Relation(name="posts", kind="hasMany", target="Post", foreign_key="authorId"))
        result = resolve_relations([user, _post()])
        assert result.ok
        assert [w.code for w in result.warnings] == ["missing_inverse_side"]

    def test_has_many_with_counterpart_is_quiet(self):
        """Test a hasMany whose target names it as inverse raises no warning."""
        user = _user(Relation(name="posts", kind="hasMany", target="Post", foreign_key="authorId"))
        result = resolve_relations([user, _post(AUTHOR)])
        assert result.ok
        assert result.warnings == []

    def test_lenient_compile_emits_warning(self):
        """Test a lenient compiler emits the artifact and keeps the warning."""
        registry = ModelRegistry()
        registry.register(_user(POSTS))
        registry.register(_post(AUTHOR.model_copy(update={"inverse_side": "articles"})))
        registry.seal()

        schema = SchemaCompiler(registry, DomainIRSettings(strict_inverse_relations=False)).compile()
        assert "inverse_mismatch" in [w.code for w in schema.warnings]


class TestGraph:
    """Test the relation graph and cycle detection."""

    def test_edges_and_neighbours(self):
        """Test edges are exposed with their kind and foreign key."""
        graph = resolve_relations([_user(POSTS), _post(AUTHOR)]).graph
        assert graph.targets_of("Post") == ("User",)
        assert graph.sources_of("Post") == ("User",)
        (edge,) = graph.edges_from("Post")
        assert edge.kind is RelationKind.BELONGS_TO
        assert edge.foreign_key == "authorId"

    def test_self_reference_cycle(self):
        """Test a self-referencing belongsTo is reported as a cycle, not an error."""
        category = Model(
            name="Category",
            fields=[_id(), Field(name="parentId", type="integer")],
            relations=[
                Relation(name="parent", kind="belongsTo", target="Category", foreign_key="parentId")
            ],
        )
        result = resolve_relations([category])
        assert result.ok
        assert result.graph.cycles() == (("Category",),)
        assert [w.code for w in result.warnings] == ["relation_cycle"]

    def test_two_model_cycle_reported_once(self):
        """Test a mutual belongsTo pair yields one cycle starting at the smaller name."""
        a = Model(
            name="A",
            fields=[_id(), Field(name="bId", type="integer")],
            relations=[Relation(name="b", kind="belongsTo", target="B", foreign_key="bId")],
        )
        b = Model(
            name="B",
            fields=[_id(), Field(name="aId", type="integer")],
            relations=[Relation(name="a", kind="belongsTo", target="A", foreign_key="aId")],
        )
        result = resolve_relations([b, a])
        assert result.graph.cycles() == (("A", "B"),)
        cycle_warnings = [w for w in result.warnings if w.code == "relation_cycle"]
        assert len(cycle_warnings) == 1
        assert "A -> B -> A" in cycle_warnings[0].message

    def test_has_many_edges_are_not_cycles(self):
        """Test a belongsTo/hasMany pair is not a dependency cycle."""
        graph = resolve_relations([_user(POSTS), _post(AUTHOR)]).graph
        assert graph.cycles() == ()
