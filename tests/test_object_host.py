"""
Host contract for plain classes (host.py)
"""

from dataclasses import dataclass

import pytest

from sanitization import ModelHost, ObjectHost, sanitize, sanitizes
from sanitization.host import PRE_PERSIST, default_host, host_for


@dataclass
class Article:
    title: str = ""
    body: str = ""


class Annotated:
    title: str
    views: int = 0


class Slotted:
    __slots__ = ("title", "body")


class Plain:
    title = ""
    _private = ""

    def publish(self):
        pass

    @classmethod
    def build(cls):
        return cls()

    @property
    def slug(self):
        return self.title.lower()

    @property
    def summary(self):
        return self._summary

    @summary.setter
    def summary(self, value):
        self._summary = value


# ============================================================================
# Attribute discovery
# ============================================================================

class TestAttributeDiscovery:

    def test_dataclass_fields(self, host):
        assert host.attribute_exists(Article, "title")
        assert host.attribute_exists(Article, "body")
        assert not host.attribute_exists(Article, "author")

    def test_annotations(self, host):
        assert host.attribute_exists(Annotated, "title")
        assert host.attribute_exists(Annotated, "views")

    def test_slots(self, host):
        assert host.attribute_names(Slotted) >= {"title", "body"}

    def test_class_attributes(self, host):
        names = host.attribute_names(Plain)
        assert "title" in names
        assert "publish" not in names
        assert "build" not in names
        assert "_private" not in names

    def test_properties_need_a_setter(self, host):
        assert host.attribute_exists(Plain, "summary")
        assert not host.attribute_exists(Plain, "slug")

    def test_dunder_names_never_exist(self, host):
        assert not host.attribute_exists(Article, "__class__")
        assert not host.attribute_exists(Article, "__dict__")

    def test_inherited_attributes(self, host):
        @dataclass
        class Post(Article):
            tags: str = ""

        assert host.attribute_names(Post) >= {"title", "body", "tags"}

    def test_get_and_set(self, host):
        record = Article(title="a")
        host.set_attribute(record, "title", "b")
        assert host.get_attribute(record, "title") == "b"

    def test_always_provisioned(self, host):
        assert host.is_provisioned(Article)


# ============================================================================
# Lifecycle hooks
# ============================================================================

class TestLifecycle:

    def test_register_and_fire(self, host, person_cls):
        seen = []
        host.register_lifecycle_hook(person_cls, PRE_PERSIST, seen.append)
        record = person_cls()
        assert host.fire(record) is record
        assert seen == [record]

    def test_phases_are_separate(self, host, person_cls):
        seen = []
        host.register_lifecycle_hook(person_cls, "post_persist", seen.append)
        host.fire(person_cls())
        assert seen == []
        host.fire(person_cls(), "post_persist")
        assert len(seen) == 1

    def test_hooks_base_classes_first(self, host, person_cls):
        order = []

        class Employee(person_cls):
            pass

        host.register_lifecycle_hook(Employee, PRE_PERSIST, lambda record: order.append("child"))
        host.register_lifecycle_hook(person_cls, PRE_PERSIST, lambda record: order.append("parent"))
        host.fire(Employee())
        assert order == ["parent", "child"]

    def test_parent_does_not_see_child_hooks(self, host, person_cls):
        class Employee(person_cls):
            pass

        host.register_lifecycle_hook(Employee, PRE_PERSIST, lambda record: None)
        assert host.hooks(person_cls) == []

    def test_fire_runs_sanitization(self, host, person_cls):
        sanitizes(person_cls, "first_name", strip=True, host=host)
        record = host.fire(person_cls(first_name="  ada "))
        assert record.first_name == "ada"

    def test_fire_through_default_host(self, person_cls):
        sanitizes(person_cls, "first_name", squish=True)
        record = default_host().fire(person_cls(first_name=" a   b "))
        assert record.first_name == "a b"


# ============================================================================
# Host selection
# ============================================================================

class TestHostFor:

    def test_default(self, person_cls):
        assert host_for(person_cls) is default_host()
        assert isinstance(default_host(), ObjectHost)

    def test_declared_on_class(self):
        custom = ObjectHost()

        class Custom:
            name = ""
            __sanitization_host__ = custom

        assert host_for(Custom) is custom

    def test_custom_host_controls_access(self):
        class DictHost(ModelHost):
            def attribute_exists(self, model, name):
                return name in ("title",)

            def get_attribute(self, record, name):
                return record.data[name]

            def set_attribute(self, record, name, value):
                record.data[name] = value

            def register_lifecycle_hook(self, model, phase, callback):
                model.callbacks = [callback]

        class Document:
            __sanitization_host__ = DictHost()

            def __init__(self, **data):
                self.data = data

        sanitizes(Document, "title", strip=True)
        document = sanitize(Document(title="  draft  "))
        assert document.data == {"title": "draft"}
        assert len(Document.callbacks) == 1

    def test_host_is_abstract(self):
        with pytest.raises(TypeError):
            ModelHost()
