"""Tests for model description and required association sampling."""

import pytest

from conftest import FakeModel, FakeSchemaProvider, post_model, user_model
from pg_seedling.schema.describer import (
    MAX_ASSOCIATION_IDS,
    AbstractModelError,
    AssociationConstraint,
    MissingParentDataError,
    ModelNotFoundError,
    SchemaDescriber,
)
from pg_seedling.schema.provider import ColumnSpec, ModelHandle, RelationSpec


def test_find_model_returns_handle():
    describer = SchemaDescriber(FakeSchemaProvider(user_model()))

    handle = describer.find_model("User")

    assert handle.storage_name == "users"


def test_find_model_raises_when_missing():
    describer = SchemaDescriber(FakeSchemaProvider(user_model()))

    with pytest.raises(ModelNotFoundError, match="Model 'Ghost' not found"):
        describer.find_model("Ghost")


def test_find_model_rejects_abstract_models():
    abstract = FakeModel(handle=ModelHandle(name="Report", storage_name="reports", abstract=True))
    describer = SchemaDescriber(FakeSchemaProvider(abstract))

    with pytest.raises(AbstractModelError, match="abstract"):
        describer.find_model("Report")


def test_describe_preserves_column_order_and_lowercases_kinds():
    describer = SchemaDescriber(FakeSchemaProvider(user_model()))

    description = describer.describe("User")

    assert list(description.attributes) == ["name", "email"]
    assert description.validations[0].attributes == ("email",)
    assert description.validations[0].kind == "presence"


def test_summary_is_deterministic_and_complete():
    describer = SchemaDescriber(FakeSchemaProvider(post_model()))

    first = describer.describe("Post").summary()
    second = describer.describe("Post").summary()

    assert first == second
    assert first == (
        "Model: Post\n"
        "Attributes: id: integer, title: string, user_id: integer, editor_id: integer\n"
        "Validations: title -> presence\n"
        "Associations: belongs_to: user, belongs_to: editor\n"
    )


def test_to_dict_mirrors_description():
    describer = SchemaDescriber(FakeSchemaProvider(user_model()))

    payload = describer.describe("User").to_dict()

    assert payload["model"] == "User"
    assert payload["attributes"] == {"name": "string", "email": "string"}
    assert payload["validations"] == [{"attributes": ["email"], "kind": "presence"}]


def test_duplicate_attributes_are_rejected():
    model = user_model()
    model.columns.append(ColumnSpec(name="email", data_type="text"))
    describer = SchemaDescriber(FakeSchemaProvider(model))

    with pytest.raises(ValueError, match="twice"):
        describer.describe("User")


def test_required_associations_sample_only_mandatory_belongs_to():
    provider = FakeSchemaProvider(post_model(), existing_ids={"users": [1, 2, 3]})
    describer = SchemaDescriber(provider)

    constraints = describer.resolve_required_associations("Post")

    assert constraints == [
        AssociationConstraint(foreign_key="user_id", related_model="users", sampled_ids=(1, 2, 3))
    ]
    assert provider.fetch_calls == [("users", MAX_ASSOCIATION_IDS, "id")]


def test_required_associations_cap_sample_size():
    provider = FakeSchemaProvider(post_model(), existing_ids={"users": list(range(200))})

    constraints = SchemaDescriber(provider).resolve_required_associations("Post")

    assert len(constraints[0].sampled_ids) == MAX_ASSOCIATION_IDS


def test_polymorphic_and_plural_relations_are_ignored():
    model = FakeModel(
        handle=ModelHandle(name="Comment", storage_name="comments"),
        relations=[
            RelationSpec(
                name="commentable",
                kind="belongs_to",
                foreign_key="commentable_id",
                related_model="posts",
                nullable=False,
                polymorphic=True,
            ),
            RelationSpec(
                name="replies",
                kind="has_many",
                foreign_key="comment_id",
                related_model="replies",
                nullable=False,
            ),
        ],
    )
    provider = FakeSchemaProvider(model)

    assert SchemaDescriber(provider).resolve_required_associations("Comment") == []
    assert provider.fetch_calls == []


def test_missing_parent_rows_fail_eagerly():
    provider = FakeSchemaProvider(post_model(), existing_ids={"users": []})

    with pytest.raises(MissingParentDataError, match="requires users records"):
        SchemaDescriber(provider).resolve_required_associations("Post")
