"""
Sanitization on declarative models (sanitization.models)

Records are sanitized by full_clean(), which create() and save() call
before writing to storage.
"""

from decimal import Decimal

import pytest

from sanitization import (
    ModelNotProvisionedFault,
    StorageFault,
    UnsupportedCaseFault,
    default_registry,
)
from sanitization.config import SanitizationSettings, set_settings
from sanitization.models import (
    CharField,
    DecimalField,
    FloatField,
    IntegerField,
    MemoryStorage,
    Model,
    ModelRegistry,
)
from sanitization.models.fields import FieldValidationError


class SsnSanitizer:
    def sanitize_each(self, record, attribute, value):
        return value.replace("-", "")


# ============================================================================
# Hooks
# ============================================================================

class TestHooks:

    def test_before_sanitization_method(self, storage):
        class Person(Model):
            first_name = CharField()

            class Meta:
                sanitizes = {"first_name": {"nullify": True}}
                before_sanitization = "change_name"

            def change_name(self):
                self.first_name = "Jane"

        Person.create_table()
        assert Person.create(first_name="John").first_name == "Jane"

    def test_after_sanitization_method(self, storage):
        class Person(Model):
            first_name = CharField(null=True)
            last_name = CharField()

            class Meta:
                sanitizes = {"first_name": {"nullify": True}}
                after_sanitization = ["change_name"]

            def change_name(self):
                self.first_name = "Jane"

        Person.create_table()
        person = Person.create(first_name="    ", last_name="anything")
        assert person.first_name == "Jane"

    def test_classmethod_receivers(self, storage):
        class Person(Model):
            first_name = CharField()

        Person.create_table()
        Person.sanitizes("first_name", strip=True)

        @Person.before_sanitization
        def shout(sender, instance, **kwargs):
            instance.first_name = instance.first_name.upper()

        @Person.after_sanitization()
        def sign(sender, instance, **kwargs):
            instance.first_name += "!"

        assert Person.create(first_name=" ada ").first_name == "ADA!"


# ============================================================================
# Built-in transforms through create()
# ============================================================================

class TestCase:

    @pytest.mark.parametrize(
        "case,value,expected",
        [
            ("downcase", "John", "john"),
            ("camelcase", "JohnPatrick", "johnPatrick"),
            ("pascalcase", "john_patrick", "JohnPatrick"),
            ("titlecase", "john_patrick", "John Patrick"),
            ("upcase", "John", "JOHN"),
        ],
    )
    def test_builtin_cases(self, storage, case, value, expected):
        class Person(Model):
            first_name = CharField()

        Person.create_table()
        Person.sanitizes("first_name", case=case)
        assert Person.create(first_name=value).first_name == expected

    def test_custom_case(self, storage):
        default_registry().register_case(
            "pipecase",
            lambda value: "|".join("".join(c for c in value if c.isalnum()).upper()),
        )

        class Person(Model):
            first_name = CharField()

        Person.create_table()
        Person.sanitizes("first_name", case="pipecase")
        assert Person.create(first_name="john").first_name == "J|O|H|N"

    def test_unsupported_case_raises_on_save(self, storage):
        class Person(Model):
            first_name = CharField()

        Person.create_table()
        Person.sanitizes("first_name", case="snakecase")
        with pytest.raises(UnsupportedCaseFault, match="snakecase"):
            Person.create(first_name="JohnPatrick")
        assert storage.rows("person") == []


class TestBuiltins:

    def test_gsub(self, storage):
        class Person(Model):
            first_name = CharField()
            phone_number = CharField(null=True)

        Person.create_table()
        Person.sanitizes("phone_number", gsub={"pattern": r"[^0-9]", "replacement": ""})
        person = Person.create(first_name="John", phone_number="+1 (801) 111-3333")
        assert person.phone_number == "18011113333"

    def test_nullify_false(self, storage):
        class Person(Model):
            first_name = CharField(null=True, blank=True)
            last_name = CharField()

        Person.create_table()
        Person.sanitizes("first_name", nullify=False)
        assert Person.create(first_name="    ", last_name="anything").first_name == "    "

    @pytest.mark.parametrize("value,expected", [("    ", None), ("John", "John")])
    def test_nullify_true(self, storage, value, expected):
        class Person(Model):
            first_name = CharField(null=True)
            last_name = CharField()

        Person.create_table()
        Person.sanitizes("first_name", nullify=True)
        assert Person.create(first_name=value, last_name="anything").first_name == expected

    def test_remove(self, storage):
        class Person(Model):
            first_name = CharField()
            zip_code = CharField(null=True)

        Person.create_table()
        Person.sanitizes("zip_code", remove="-")
        assert Person.create(first_name="John", zip_code="55555-4444-").zip_code == "555554444"

    def test_round(self, storage):
        class Person(Model):
            first_name = CharField()
            income = FloatField(null=True)

        Person.create_table()
        Person.sanitizes("income", round=2)
        assert Person.create(first_name="John", income=12345.7777777).income == 12345.78

    @pytest.mark.parametrize(
        "enabled,expected",
        [(True, "John John"), (False, "    John    John    ")],
    )
    def test_squish(self, storage, enabled, expected):
        class Person(Model):
            first_name = CharField()

        Person.create_table()
        Person.sanitizes("first_name", squish=enabled)
        assert Person.create(first_name="    John    John    ").first_name == expected

    @pytest.mark.parametrize(
        "value,expected",
        [("    John", "John"), ("John     ", "John"), ("Jo    hn", "Jo    hn")],
    )
    def test_strip(self, storage, value, expected):
        class Person(Model):
            first_name = CharField()

        Person.create_table()
        Person.sanitizes("first_name", strip=True)
        assert Person.create(first_name=value).first_name == expected

    def test_truncate(self, storage):
        class Person(Model):
            first_name = CharField()

        Person.create_table()
        Person.sanitize("first_name", truncate=4)
        assert Person.create(first_name="Johnny").first_name == "John"


# ============================================================================
# Custom sanitizers
# ============================================================================

class TestCustomSanitizers:

    def test_user_defined_sanitizer(self, storage):
        default_registry().register(SsnSanitizer)

        class Person(Model):
            first_name = CharField()
            ssn = CharField(null=True)

        Person.create_table()
        Person.sanitizes("ssn", ssn=True)
        assert Person.create(first_name="John", ssn="-333-22-4444-").ssn == "333224444"

    def test_record_sanitizer(self, storage):
        class PersonSanitizer:
            def sanitize(self, record):
                record.first_name = "Harry"
                record.last_name = "Potter"

        class Person(Model):
            first_name = CharField()
            last_name = CharField(null=True)

            class Meta:
                sanitizes_with = PersonSanitizer

        Person.create_table()
        person = Person.create(first_name="John", last_name="anything")
        assert (person.first_name, person.last_name) == ("Harry", "Potter")

    def test_everything_together(self, storage):
        default_registry().register(SsnSanitizer)

        class PersonSanitizer:
            def sanitize(self, record):
                record.first_name = record.first_name[:3] + "Harry"

        class Person(Model):
            first_name = CharField()
            last_name = CharField(null=True)
            zip_code = CharField(null=True)
            ssn = CharField(null=True)

            class Meta:
                sanitizes = {
                    "first_name": {"case": "downcase"},
                    "last_name": {"case": "upcase", "truncate": 6},
                    "zip_code": {"remove": "-"},
                    "ssn": {"ssn": True},
                }
                sanitizes_with = PersonSanitizer
                before_sanitization = "prepend"
                after_sanitization = "append"

            def prepend(self):
                self.first_name = "PRE" + self.first_name

            def append(self):
                self.first_name += "POST"

        Person.create_table()
        person = Person.create(
            first_name="John",
            last_name="Jingleheimer",
            zip_code="55555-4444-",
            ssn="-333-22-4444-",
        )
        assert person.first_name == "preHarryPOST"
        assert person.last_name == "JINGLE"
        assert person.zip_code == "555554444"
        assert person.ssn == "333224444"


# ============================================================================
# Provisioning
# ============================================================================

class TestProvisioning:

    def test_meta_deferred_until_table_exists(self, storage):
        class Person(Model):
            first_name = CharField()

            class Meta:
                sanitizes = {"first_name": {"strip": True}}

        assert Person.sanitization_config() is None
        assert not Person._meta.sanitization_applied

        Person.create_table()
        config = Person.sanitization_config()
        assert config.attributes["first_name"].names == ["strip"]
        assert Person._meta.sanitization_applied

    def test_meta_applied_once(self, storage):
        class Person(Model):
            first_name = CharField()

            class Meta:
                sanitizes = {"first_name": {"strip": True}}

        Person.create_table()
        Person.create_table()
        ModelRegistry.create_tables()
        assert Person.sanitization_config().attributes["first_name"].names == ["strip"]

    def test_meta_applied_at_class_creation_when_table_exists(self, storage):
        storage.create_table("people")

        class Person(Model):
            table = "people"
            first_name = CharField()

            class Meta:
                sanitizes = {"first_name": {"squish": True}}

        assert Person.sanitization_config() is not None
        assert Person.create(first_name=" a   b ").first_name == "a b"

    def test_registry_create_tables(self, storage):
        class Person(Model):
            first_name = CharField()

            class Meta:
                sanitizes = {"first_name": {"strip": True}}

        class Pet(Model):
            name = CharField()

        assert ModelRegistry.create_tables() == ["person", "pet"]
        assert Person.sanitization_config() is not None
        assert Pet.sanitization_config() is None

    def test_other_storage_does_not_provision(self, storage):
        class Person(Model):
            first_name = CharField()

            class Meta:
                sanitizes = {"first_name": {"strip": True}}

        ModelRegistry.create_tables(MemoryStorage())
        assert Person.sanitization_config() is None

    def test_classmethod_declaration_skipped(self, storage):
        class Person(Model):
            first_name = CharField()

        assert Person.sanitizes("first_name", strip=True) is None
        assert Person.sanitization_config() is None

    def test_no_storage_skipped(self):
        class Person(Model):
            first_name = CharField()

        assert Person.sanitizes("first_name", strip=True) is None

    def test_abstract_models_never_provisioned(self, storage):
        class Base(Model):
            name = CharField()

            class Meta:
                abstract = True
                sanitizes = {"name": {"strip": True}}

        assert Base.sanitizes("name", strip=True) is None
        assert ModelRegistry.get("Base") is None

    def test_strict_mode_raises_at_class_creation(self, storage):
        set_settings(SanitizationSettings(skip_unprovisioned=False))
        with pytest.raises(ModelNotProvisionedFault):
            class Person(Model):
                first_name = CharField()

                class Meta:
                    sanitizes = {"first_name": {"strip": True}}

    def test_strict_mode_classmethod(self, storage):
        set_settings(SanitizationSettings(skip_unprovisioned=False))

        class Person(Model):
            first_name = CharField()

        with pytest.raises(ModelNotProvisionedFault):
            Person.sanitizes("first_name", strip=True)

    def test_hooks_connect_without_table(self, storage):
        class Person(Model):
            first_name = CharField()

        Person.before_sanitization(lambda sender, instance, **kw: None)
        assert len(Person.sanitization_config().before_sanitization) == 1


# ============================================================================
# Persistence
# ============================================================================

class TestPersistence:

    def test_save_requires_storage(self):
        class Person(Model):
            first_name = CharField()

        with pytest.raises(StorageFault):
            Person(first_name="a").save()

    def test_save_requires_table(self, storage):
        class Person(Model):
            first_name = CharField()

        with pytest.raises(StorageFault, match="does not exist"):
            Person(first_name="a").save()

    def test_stored_row_is_sanitized(self, storage):
        class Person(Model):
            first_name = CharField()
            age = IntegerField(null=True)

        Person.create_table()
        Person.sanitizes("first_name", strip=True, case="titlecase")
        person = Person.create(first_name="  ada ", age="36")
        fetched = Person.get(person.id)
        assert fetched == person
        assert fetched.to_dict() == {"id": 1, "first_name": "Ada", "age": 36}

    def test_update_sanitizes_again(self, storage):
        class Person(Model):
            first_name = CharField()

        Person.create_table()
        Person.sanitizes("first_name", squish=True)
        person = Person.create(first_name="a  b")
        person.first_name = "  c   d "
        person.save()
        assert Person.get(person.id).first_name == "c d"
        assert len(Person.all()) == 1

    def test_validation_sees_sanitized_value(self, storage):
        class Person(Model):
            first_name = CharField()

        Person.create_table()
        Person.sanitizes("first_name", nullify=True)
        with pytest.raises(FieldValidationError, match="Cannot be null"):
            Person.create(first_name="   ")

    def test_truncate_before_length_check(self, storage):
        class Person(Model):
            code = CharField(max_length=3)

        Person.create_table()
        Person.sanitizes("code", truncate=3)
        assert Person.create(code="ABCDEF").code == "ABC"

    def test_decimal_round_and_to_dict(self, storage):
        class Invoice(Model):
            total = DecimalField(max_digits=8, decimal_places=2)

        Invoice.create_table()
        Invoice.sanitizes("total", round=2)
        invoice = Invoice.create(total=Decimal("10.005"))
        assert invoice.to_dict(exclude=["id"]) == {"total": "10.01"}

    def test_unknown_field_rejected(self):
        class Person(Model):
            first_name = CharField()

        with pytest.raises(TypeError, match="unexpected fields"):
            Person(nickname="x")

    def test_subclass_runs_parent_sanitization(self, storage):
        class Person(Model):
            first_name = CharField()

        class Employee(Person):
            badge = CharField(null=True)

        ModelRegistry.create_tables()
        Person.sanitizes("first_name", strip=True)
        Employee.sanitizes("badge", case="upcase")
        employee = Employee.create(first_name=" ada ", badge="x1")
        assert (employee.first_name, employee.badge) == ("ada", "X1")
        assert Person.create(first_name=" b ").first_name == "b"
