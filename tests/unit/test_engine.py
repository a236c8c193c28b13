"""Tests for translating records and their associations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel
import pytest

from translated_fields.core.exceptions import (
    MalformedAssociationError,
    MalformedFieldError,
    MissingTranslationError,
)
from translated_fields.i18n import use_locale
from translated_fields.translations import (
    NOT_LOADED,
    MissingTranslationRecorder,
    TranslationRegistry,
    raise_missing,
    translate,
)


@dataclass
class Author:
    name: str
    bio: dict[str, str] | None = None
    translated_bio: str | None = None


@dataclass
class Comment:
    text: dict[str, str]
    author: Any = None
    translated_text: str | None = None


@dataclass
class Post:
    title: dict[str, str]
    comments: Any = NOT_LOADED
    author: Any = NOT_LOADED
    slug: str = "post"
    translated_title: str | None = None


@dataclass
class FeaturedPost(Post):
    badge: str = "star"


@dataclass(frozen=True)
class Tag:
    label: dict[str, str]
    translated_label: str | None = None


@dataclass(eq=False)
class Node:
    name: dict[str, str]
    parent: Any = None
    children: list[Any] = field(default_factory=list)
    translated_name: str | None = None


@dataclass(eq=False)
class Leaf:
    text: dict[str, str]
    translated_text: str | None = None


class FreshLeaf:
    """Builds a new Leaf on every read, like a computed association."""

    def __get__(self, shelf: Any, owner: type | None = None) -> Any:
        if shelf is None:
            return self
        return Leaf(text={"en": f"child {shelf.number}"})


@dataclass
class Shelf:
    number: int
    child = FreshLeaf()


class Article(BaseModel):
    title: dict[str, str]
    tags: list[str] = []
    translated_title: str | None = None


@pytest.fixture()
def registry() -> TranslationRegistry:
    registry = TranslationRegistry()
    registry.register(Author, fields=("bio",))
    registry.register(Comment, fields=("text",), associations=("author",))
    registry.register(Post, fields=("title",), associations=("comments", "author"))
    registry.register(Tag, fields=("label",))
    registry.register(Node, fields=("name",), associations=("parent", "children"))
    registry.register(Article, fields=("title",))
    registry.register(Leaf, fields=("text",))
    registry.register(Shelf, associations=("child",))
    return registry


def make_post(comment_count: int = 2) -> Post:
    comments = [
        Comment(text={"en": f"Comment {i}", "fr": f"Commentaire {i}"})
        for i in range(comment_count)
    ]
    return Post(title={"en": "The title", "fr": "Le titre"}, comments=comments)


def test_post_with_comments_is_translated(registry: TranslationRegistry) -> None:
    post = make_post()

    result = translate(post, "fr", registry=registry)

    assert isinstance(result, Post)
    assert result.translated_title == "Le titre"
    assert [c.translated_text for c in result.comments] == [
        "Commentaire 0",
        "Commentaire 1",
    ]
    assert result.slug == "post"
    assert result.title == post.title


def test_input_is_not_mutated(registry: TranslationRegistry) -> None:
    post = make_post()

    result = translate(post, "fr", registry=registry)

    assert result is not post
    assert post.translated_title is None
    assert [c.translated_text for c in post.comments] == [None, None]
    assert result.comments is not post.comments


def test_to_many_association_preserves_count_and_order(
    registry: TranslationRegistry,
) -> None:
    post = make_post(comment_count=5)

    result = translate(post, "en", registry=registry)

    assert len(result.comments) == 5
    assert [c.translated_text for c in result.comments] == [
        f"Comment {i}" for i in range(5)
    ]


def test_to_one_association_is_translated(registry: TranslationRegistry) -> None:
    post = make_post()
    post.author = Author(name="Ada", bio={"en": "Writer", "fr": "Écrivaine"})

    result = translate(post, "fr", registry=registry)

    assert result.author.translated_bio == "Écrivaine"
    assert result.author.name == "Ada"
    assert post.author.translated_bio is None


def test_not_loaded_associations_pass_through(registry: TranslationRegistry) -> None:
    post = Post(title={"en": "The title"})

    result = translate(post, "en", registry=registry)

    assert result.comments is NOT_LOADED
    assert result.author is NOT_LOADED
    assert result.translated_title == "The title"


def test_empty_and_null_associations(registry: TranslationRegistry) -> None:
    post = Post(title={"en": "The title"}, comments=[], author=None)

    result = translate(post, "en", registry=registry)

    assert result.comments == []
    assert result.author is None


def test_translation_is_idempotent(registry: TranslationRegistry) -> None:
    post = make_post()
    post.author = Author(name="Ada", bio={"en": "Writer"})

    once = translate(post, "fr", registry=registry)
    twice = translate(once, "fr", registry=registry)

    assert twice == once


def test_missing_translations_reported_across_the_graph(
    registry: TranslationRegistry, recorder: MissingTranslationRecorder
) -> None:
    post = make_post()
    post.comments.append(Comment(text={"fr": "Seulement en français"}))

    result = translate(
        post, "nl", fallback_locale="en", on_missing_translation=recorder, registry=registry
    )

    assert result.translated_title == "The title"
    assert [c.translated_text for c in result.comments] == [
        "Comment 0",
        "Comment 1",
        None,
    ]
    assert recorder.locales == ["nl", "nl", "nl", "nl"]


def test_null_field_yields_null_without_report(
    registry: TranslationRegistry, recorder: MissingTranslationRecorder
) -> None:
    author = Author(name="Ada")

    result = translate(author, "fr", on_missing_translation=recorder, registry=registry)

    assert result.translated_bio is None
    assert recorder.reports == []


def test_strict_handler_raises(registry: TranslationRegistry) -> None:
    post = make_post()

    with pytest.raises(MissingTranslationError) as excinfo:
        translate(post, "nl", on_missing_translation=raise_missing, registry=registry)

    assert excinfo.value.locale == "nl"
    assert excinfo.value.available == ["en", "fr"]


def test_malformed_field_names_kind_and_attribute(registry: TranslationRegistry) -> None:
    post = Post(title="The title")  # type: ignore[arg-type]

    with pytest.raises(MalformedFieldError) as excinfo:
        translate(post, "en", registry=registry)

    assert excinfo.value.kind == "Post"
    assert excinfo.value.attribute == "title"
    assert excinfo.value.details["found"] == "str"


@pytest.mark.parametrize("comments", ["not records", 42, [1, 2], {"en": "x"}])
def test_malformed_association(registry: TranslationRegistry, comments: Any) -> None:
    post = Post(title={"en": "The title"}, comments=comments)

    with pytest.raises(MalformedAssociationError) as excinfo:
        translate(post, "en", registry=registry)

    assert excinfo.value.kind == "Post"
    assert excinfo.value.attribute == "comments"


@pytest.mark.parametrize("value", [42, 1.5, "text", None, True, NOT_LOADED])
def test_foreign_values_pass_through(registry: TranslationRegistry, value: Any) -> None:
    assert translate(value, "fr", registry=registry) is value


def test_unregistered_objects_and_foreign_maps_pass_through(
    registry: TranslationRegistry,
) -> None:
    stranger = object()
    settings_map = {"retries": 3}

    assert translate(stranger, "fr", registry=registry) is stranger
    assert translate(settings_map, "fr", registry=registry) is settings_map


def test_collections_keep_shape(registry: TranslationRegistry) -> None:
    posts = [make_post(), make_post(0)]

    as_list = translate(posts, "fr", registry=registry)
    as_tuple = translate(tuple(posts), "fr", registry=registry)

    assert isinstance(as_list, list) and len(as_list) == 2
    assert isinstance(as_tuple, tuple) and len(as_tuple) == 2
    assert [p.translated_title for p in as_list] == ["Le titre", "Le titre"]


def test_collection_of_maps_resolves_each(registry: TranslationRegistry) -> None:
    result = translate([{"en": "a", "fr": "b"}, {"en": "c"}], "fr", registry=registry)

    assert result == ["b", "c"]


def test_ambient_locale_is_used_when_none_given(registry: TranslationRegistry) -> None:
    with use_locale("fr"):
        result = translate(make_post(), registry=registry)

    assert result.translated_title == "Le titre"


def test_subclasses_share_the_parent_declaration(registry: TranslationRegistry) -> None:
    post = FeaturedPost(title={"en": "The title", "fr": "Le titre"}, comments=[])

    result = translate(post, "fr", registry=registry)

    assert isinstance(result, FeaturedPost)
    assert result.translated_title == "Le titre"
    assert result.badge == "star"


def test_frozen_dataclass_records(registry: TranslationRegistry) -> None:
    tag = Tag(label={"en": "News", "fr": "Actualités"})

    result = translate(tag, "fr", registry=registry)

    assert result.translated_label == "Actualités"
    assert tag.translated_label is None


def test_pydantic_records(registry: TranslationRegistry) -> None:
    article = Article(title={"en": "Hello", "fr": "Bonjour"}, tags=["intro"])

    result = translate(article, "fr", registry=registry)

    assert isinstance(result, Article)
    assert result.translated_title == "Bonjour"
    assert result.model_dump()["translated_title"] == "Bonjour"
    assert result.tags == ["intro"]
    assert article.translated_title is None


def test_reference_cycles_are_reproduced(registry: TranslationRegistry) -> None:
    root = Node(name={"en": "Root", "fr": "Racine"})
    leaf = Node(name={"en": "Leaf", "fr": "Feuille"}, parent=root)
    root.children.append(leaf)

    result = translate(root, "fr", registry=registry)

    assert result.translated_name == "Racine"
    assert result.children[0].translated_name == "Feuille"
    assert result.children[0].parent is result


def test_shared_records_are_translated_once(
    registry: TranslationRegistry, recorder: MissingTranslationRecorder
) -> None:
    ada = Author(name="Ada", bio={"en": "Writer"})
    post = Post(
        title={"fr": "Le titre"},
        author=ada,
        comments=[Comment(text={"fr": "Oui"}, author=ada)],
    )

    result = translate(post, "fr", on_missing_translation=recorder, registry=registry)

    assert result.author is result.comments[0].author
    assert recorder.locales == ["fr"]


def test_computed_associations_are_not_mixed_up(registry: TranslationRegistry) -> None:
    shelves = [Shelf(number=n) for n in range(20)]

    result = translate(shelves, "en", registry=registry)

    assert [shelf.child.translated_text for shelf in result] == [
        f"child {n}" for n in range(20)
    ]


@pytest.mark.parametrize("kind", [set, frozenset])
def test_unordered_collections_become_lists(
    registry: TranslationRegistry, kind: type
) -> None:
    leaves = kind([Leaf(text={"en": "a"}), Leaf(text={"en": "b"})])

    result = translate(leaves, "en", registry=registry)

    assert isinstance(result, list)
    assert sorted(leaf.translated_text for leaf in result) == ["a", "b"]
    assert all(leaf.translated_text is None for leaf in leaves)
