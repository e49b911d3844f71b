"""Unit tests for dashfs.fs.path — normalization, validation, hashing, relations."""

import hashlib

import pytest

from dashfs.engine.errors import BadRequestError, PathError
from dashfs.fs.path import (
    Path,
    RootType,
    child_path,
    hash_path,
    leaf_of,
    normalize,
    slugify,
    user_id_from_principal,
)


class TestNormalize:
    def test_adds_leading_slash_and_lowercases(self):
        assert normalize("User/Alice/Reports") == "/user/alice/reports"

    def test_trims_whitespace_and_trailing_slash(self):
        assert normalize("  /user/alice/reports/ ") == "/user/alice/reports"

    def test_bare_slash_kept(self):
        assert normalize("/") == "/"


class TestSlugify:
    def test_spaces_become_dashes(self):
        assert slugify("Q1 Reports") == "q1-reports"

    def test_punctuation_collapsed_and_trimmed(self):
        assert slugify("Copy of Ops!") == "copy-of-ops"
        assert slugify("--a  //  b--") == "a-b"

    def test_accents_folded_to_ascii(self):
        assert slugify("Café  Déjà-vu") == "cafe-deja-vu"

    def test_only_symbols_gives_empty(self):
        assert slugify("!!!") == ""
        assert slugify(None) == ""


class TestParse:
    def test_user_root(self):
        p = Path.parse("/user/alice")
        assert p.root_type == RootType.USER
        assert p.root_name == "alice"
        assert p.is_root is True
        assert p.root_path == "/user/alice"

    def test_nested_namespace_path(self):
        p = Path.parse("/Namespace/Ops/Dashboards/Latency/")
        assert p.path == "/namespace/ops/dashboards/latency"
        assert p.root_type == RootType.NAMESPACE
        assert p.root_name == "ops"
        assert p.leaf == "latency"
        assert p.parent_path == "/namespace/ops/dashboards"
        assert p.segments == ["namespace", "ops", "dashboards", "latency"]
        assert p.is_root is False

    def test_missing_root_name(self):
        with pytest.raises(PathError) as exc:
            Path.parse("/user")
        assert exc.value.reason == "missing_root"

    def test_slash_only(self):
        with pytest.raises(PathError) as exc:
            Path.parse("/")
        assert exc.value.reason == "missing_root"

    def test_unknown_root_type(self):
        with pytest.raises(PathError) as exc:
            Path.parse("/group/ops/x")
        assert exc.value.reason == "unknown_root"

    def test_empty_segment(self):
        with pytest.raises(PathError) as exc:
            Path.parse("/user//reports")
        assert exc.value.reason == "empty_segment"

    def test_path_error_is_bad_request(self):
        with pytest.raises(BadRequestError) as exc:
            Path.parse("nope")
        assert exc.value.status_code == 400
        assert exc.value.to_dict()["reason"] == "missing_root"

    def test_get_is_parse(self):
        assert Path.get(" /User/Alice/Reports/ ") == Path.parse("/user/alice/reports")
        with pytest.raises(PathError):
            Path.get("/group/ops")


class TestRootConstructors:
    def test_typed_principal(self):
        assert Path.for_user("user.alice").path == "/user/alice"

    def test_untyped_principal(self):
        assert Path.for_user("Alice").path == "/user/alice"

    def test_dotted_user_id_stays_one_segment(self):
        p = Path.for_user("user.jane.doe")
        assert p.path == "/user/jane.doe"
        assert p.is_root

    def test_empty_user_id_rejected(self):
        with pytest.raises(PathError):
            Path.for_user("user.")

    def test_namespace_root(self):
        assert Path.for_namespace("Ops").path == "/namespace/ops"

    def test_bad_alias_rejected(self):
        with pytest.raises(PathError):
            Path.for_namespace("a/b")

    def test_user_id_from_principal(self):
        assert user_id_from_principal("user.alice") == "alice"
        assert user_id_from_principal("alice") == "alice"


class TestHashing:
    def test_md5_of_canonical_bytes(self):
        assert hash_path("/user/a") == hashlib.md5(b"/user/a").digest()

    def test_deterministic(self):
        assert hash_path("/user/a/b") == hash_path("/user/a/b")
        assert len(hash_path("/user/a/b")) == 16

    def test_normalized_forms_share_hash(self):
        assert Path.parse("/USER/A/B/").hash() == hash_path("/user/a/b")

    def test_distinct_paths_differ(self):
        assert hash_path("/user/a/b") != hash_path("/user/a/c")


class TestRelations:
    def test_ancestor_on_segment_boundary(self):
        assert Path.parse("/user/a/b").is_ancestor(Path.parse("/user/a/b/c")) is True
        assert Path.parse("/user/a/b").is_ancestor(Path.parse("/user/a/b/c/d")) is True

    def test_prefix_is_not_ancestor(self):
        assert Path.parse("/user/a/b").is_ancestor(Path.parse("/user/a/bc")) is False

    def test_not_own_ancestor(self):
        p = Path.parse("/user/a/b")
        assert p.is_ancestor(p) is False

    def test_child_path(self):
        assert child_path("/user/a", "Q1 Numbers") == "/user/a/q1-numbers"
        assert Path.parse("/user/a").child_path("Reports") == "/user/a/reports"

    def test_child_path_empty_slug(self):
        with pytest.raises(PathError) as exc:
            child_path("/user/a", "???")
        assert exc.value.reason == "empty_slug"

    def test_with_leaf(self):
        assert Path.parse("/user/a/reports").with_leaf("Old Reports").path == "/user/a/old-reports"

    def test_root_not_renamable(self):
        with pytest.raises(PathError) as exc:
            Path.parse("/user/a").with_leaf("b")
        assert exc.value.reason == "root_rename"

    def test_leaf_of(self):
        assert leaf_of("/user/a/reports") == "reports"

    def test_equality_and_hash(self):
        assert Path.parse("/user/a/B") == Path.parse("user/a/b/")
        assert len({Path.parse("/user/a/b"), Path.parse("/USER/a/b")}) == 1
        assert str(Path.parse("/user/a")) == "/user/a"
