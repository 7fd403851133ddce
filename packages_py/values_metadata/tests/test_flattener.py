"""
Tests for the value tree flattener.
"""
import pytest
from values_metadata.domain import NIL_PLACEHOLDER
from values_metadata.errors import ParseError
from values_metadata.flattener import (
    create_values_object,
    create_values_object_from_file,
    flatten,
)


def by_name(params):
    return {p.name: p for p in params}


class TestFlatten:
    def test_nested_paths(self):
        tree = {"a": {"b": 1, "list": [{"c": True}, "x"]}}
        assert flatten(tree) == {"a.b": 1, "a.list[0].c": True, "a.list[1]": "x"}

    def test_empty_containers_are_leaves(self):
        assert flatten({"labels": {}, "args": []}) == {"labels": {}, "args": []}

    def test_nested_lists(self):
        assert flatten({"m": [[1, 2]]}) == {"m[0][0]": 1, "m[0][1]": 2}


class TestCreateValuesObject:
    def test_scalar_types(self):
        params = by_name(create_values_object(
            "replicaCount: 3\nratio: 0.5\nenabled: false\nname: web\n"
        ))
        assert (params["replicaCount"].value, params["replicaCount"].type) == (3, "number")
        assert params["ratio"].type == "number"
        assert (params["enabled"].value, params["enabled"].type) == (False, "boolean")
        assert (params["name"].value, params["name"].type) == ("web", "string")

    def test_plain_array_collapse(self):
        params = create_values_object("image:\n  pullSecrets:\n    - one\n    - two\n    - three\n")
        assert len(params) == 1
        assert params[0].name == "image.pullSecrets"
        assert params[0].value == ["one", "two", "three"]
        assert params[0].type == "array"

    def test_mixed_array_expansion(self):
        content = """\
extraEnv:
  - name: FOO
    value: bar
  - name: BAZ
    value: qux
ports:
  - http
  - 8080
"""
        params = by_name(create_values_object(content))
        assert set(params) == {
            "extraEnv[0].name",
            "extraEnv[0].value",
            "extraEnv[1].name",
            "extraEnv[1].value",
            "ports[0]",
            "ports[1]",
        }
        assert params["ports[1]"].value == 8080
        assert params["ports[1]"].type == "number"

    def test_plain_array_inside_object_array(self):
        content = "hosts:\n  - name: a\n    paths: [/, /api]\n"
        params = by_name(create_values_object(content))
        assert params["hosts[0].paths"].value == ["/", "/api"]
        assert "hosts[0].paths[0]" not in params
        assert params["hosts[0].name"].value == "a"

    def test_plain_array_under_int_key(self):
        params = create_values_object("ports:\n  80: [a, b]\n")
        assert [(p.name, p.value) for p in params] == [("ports.80", ["a", "b"])]

    def test_plain_array_under_bool_like_key(self):
        params = create_values_object("triggers:\n  on: [push, tag]\n  off: []\n")
        assert [(p.name, p.value) for p in params] == [
            ("triggers.true", ["push", "tag"]),
            ("triggers.false", []),
        ]

    def test_plain_array_under_dotted_key(self):
        params = create_values_object('ann:\n  "a.b": [x, y]\n')
        assert [(p.name, p.value, p.type) for p in params] == [("ann.a.b", ["x", "y"], "array")]

    def test_mixed_array_under_dotted_key_stays_expanded(self):
        params = create_values_object('ann:\n  "a.b": [x, 1]\n')
        assert [p.name for p in params] == ["ann.a.b[0]", "ann.a.b[1]"]

    def test_empty_array(self):
        params = create_values_object("args: []\n")
        assert params[0].name == "args"
        assert params[0].value == []
        assert params[0].type == "array"

    def test_empty_object(self):
        params = create_values_object("podLabels: {}\n")
        assert params[0].value == {}
        assert params[0].type == "object"

    def test_null_maps_to_placeholder(self):
        params = by_name(create_values_object("existingSecret:\nschedulerName: ~\n"))
        assert params["existingSecret"].value == NIL_PLACEHOLDER
        assert params["schedulerName"].value == "nil"
        assert params["schedulerName"].value is not None

    def test_no_duplicate_names(self):
        params = create_values_object("a: [x, y, z]\nb:\n  c: [p, q]\n")
        names = [p.name for p in params]
        assert names == ["a", "b.c"]
        assert len(names) == len(set(names))

    def test_timestamps_stay_strings(self):
        params = create_values_object("since: 2024-01-01\n")
        assert params[0].value == "2024-01-01"
        assert params[0].type == "string"

    def test_empty_document(self):
        assert create_values_object("# only comments\n") == []

    def test_malformed_yaml(self):
        with pytest.raises(ParseError):
            create_values_object("key: [unclosed\n")

    def test_from_file(self, tmp_path):
        path = tmp_path / "values.yaml"
        path.write_text("## @param replicaCount Number of replicas\nreplicaCount: 3\n")
        params = create_values_object_from_file(path)
        assert [(p.name, p.value) for p in params] == [("replicaCount", 3)]
