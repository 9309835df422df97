"""Tests for the derived collection and map operations."""

import pytest

from slotdict import Dict, GenericMap, InvalidKeyType


class TestCollectionOps:
    def test_map(self):
        d = Dict({"a": 1, "b": 2})
        assert sorted(d.map(lambda value, key, obj: f"{key}={value}")) == ["a=1", "b=2"]

    def test_map_with_context(self):
        class Fmt:
            sep = ":"

        d = Dict({"a": 1})
        assert d.map(lambda self, value, key, obj: key + self.sep + str(value), Fmt()) == ["a:1"]

    def test_filter_returns_same_kind(self):
        class Counts(Dict):
            pass

        d = Counts({"a": 1, "b": 2, "c": 3}, get_default=lambda key: 0)
        odd = d.filter(lambda value, key, obj: value % 2)
        assert isinstance(odd, Counts)
        assert odd.to_object() == {"a": 1, "c": 3}
        assert odd.get("missing") == 0

    def test_some_every(self):
        d = Dict({"a": 1, "b": 2})
        assert d.some(lambda value, key, obj: value > 1)
        assert not d.some(lambda value, key, obj: value > 2)
        assert d.every(lambda value, key, obj: value > 0)
        assert not d.every(lambda value, key, obj: value > 1)
        assert Dict().every(lambda value, key, obj: False)

    def test_for_each(self):
        d = Dict({"a": 1, "b": 2})
        seen = []
        d.for_each(lambda value, key, obj: seen.append((key, value)))
        assert sorted(seen) == [("a", 1), ("b", 2)]

    def test_to_array(self):
        assert sorted(Dict({"a": 1, "b": 2}).to_array()) == [1, 2]

    def test_clone_is_independent(self):
        d = Dict({"a": 1}, get_default=lambda key: "d")
        c = d.clone()
        c.set("b", 2)
        assert d.to_object() == {"a": 1}
        assert c.to_object() == {"a": 1, "b": 2}
        assert c.get("x") == "d"

    def test_clone_does_not_copy_listeners(self):
        d = Dict({"a": 1})
        d.map_changes()
        assert not d.clone().dispatches_map_changes


class TestMapOps:
    def test_keys_values_items(self):
        d = Dict({"a": 1, "b": 2})
        assert sorted(d.keys()) == ["a", "b"]
        assert sorted(d.values()) == [1, 2]
        assert sorted(d.items()) == [("a", 1), ("b", 2)]
        assert sorted(d.entries()) == [("a", 1), ("b", 2)]

    def test_add_each_returns_self(self):
        d = Dict()
        assert d.add_each({"a": 1}) is d
        assert d.add_each(None) is d
        d.add_each([("b", 2)]).add_each(Dict({"c": 3}))
        assert d.to_object() == {"a": 1, "b": 2, "c": 3}

    def test_delete_each(self):
        d = Dict({"a": 1, "b": 2, "c": 3})
        d.delete_each(["a", "c", "zzz"])
        assert d.to_object() == {"b": 2}

    def test_to_object_is_snapshot(self):
        d = Dict({"a": 1})
        obj = d.to_object()
        d.set("b", 2)
        obj["c"] = 3
        assert obj == {"a": 1, "c": 3}
        assert d.to_object() == {"a": 1, "b": 2}

    def test_equals(self):
        d = Dict({"a": 1, "b": 2})
        assert d.equals(Dict({"b": 2, "a": 1}))
        assert d.equals({"a": 1, "b": 2})
        assert not d.equals({"a": 1})
        assert not d.equals({"a": 1, "b": 3})
        assert not d.equals({"a": 1, "c": 2})
        assert not d.equals([("a", 1), ("b", 2)])

    def test_equals_custom(self):
        d = Dict({"a": "X"})
        assert d.equals({"a": "x"}, lambda left, right: left.lower() == right.lower())

    def test_eq_operator(self):
        assert Dict({"a": 1}) == Dict({"a": 1})
        assert Dict({"a": 1}) == {"a": 1}
        assert Dict({"a": 1}) != {"a": 2}
        assert Dict() != []

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Dict())

    def test_generic_reduce_default(self):
        class Plain(GenericMap):
            def __init__(self, data):
                self.data = data

            def get(self, key, default=None):
                return self.data.get(key, default)

            def set(self, key, value):
                inserted = key not in self.data
                self.data[key] = value
                return inserted

            def has(self, key):
                return key in self.data

            def delete(self, key):
                return self.data.pop(key, None) is not None

            def clear(self):
                self.data.clear()

            def __len__(self):
                return len(self.data)

            def __iter__(self):
                return iter(list(self.data))

            def construct_clone(self, values=None):
                return Plain({}).add_each(values)

        p = Plain({"a": 1, "b": 2})
        assert p.reduce(lambda acc, value, key, obj: acc + value, 0) == 3
        assert p.equals(Dict({"a": 1, "b": 2}))
        assert p.filter(lambda value, key, obj: value > 1).data == {"b": 2}


class TestMappingProtocol:
    def test_getitem(self):
        d = Dict({"a": 1}, get_default=lambda key: "default")
        assert d["a"] == 1
        with pytest.raises(KeyError):
            d["missing"]

    def test_setitem_delitem(self):
        d = Dict()
        d["a"] = 1
        assert d.get("a") == 1
        del d["a"]
        assert len(d) == 0
        with pytest.raises(KeyError):
            del d["a"]

    def test_contains(self):
        d = Dict({"a": 1, "__proto__": 2})
        assert "a" in d
        assert "__proto__" in d
        assert "b" not in d
        assert 1 not in d

    def test_getitem_rejects_non_string(self):
        with pytest.raises(InvalidKeyType):
            Dict()[1]

    def test_iter_tolerates_mutation(self):
        d = Dict({"a": 1, "b": 2})
        for key in d:
            d.delete(key)
        assert len(d) == 0

    def test_dict_conversion(self):
        d = Dict({"a": 1, "b": 2})
        assert dict(d.items()) == {"a": 1, "b": 2}

    def test_repr(self):
        assert repr(Dict({"a": 1})) == "Dict({'a': 1})"
