"""Tests for the entity store data-access layer."""

import io
import os
from datetime import date, datetime

import pytest
from botocore.exceptions import ClientError
from werkzeug.datastructures import FileStorage

from RealtyMVP.exceptions import (
    EntityNotFoundError,
    InvalidQueryError,
    UnknownEntityKindError,
    UploadError,
)
from RealtyMVP.models import Commission, Property
from RealtyMVP.services.entity_store import (
    coerce_value,
    create_entity,
    delete_entity,
    discard_uploads,
    filter_entities,
    find_entity,
    get_entity,
    list_entities,
    resolve_kind,
    update_entity,
    upload_file,
)
from RealtyMVP.utils import r2_storage


class TestKinds:
    """Tests for kind resolution."""

    @pytest.mark.parametrize("raw, kind", [("property", "property"), ("properties", "property"), ("Clients", "client")])
    def test_aliases(self, raw, kind) -> None:
        assert resolve_kind(raw) == kind

    def test_unknown_kind(self, app) -> None:
        with pytest.raises(UnknownEntityKindError):
            list_entities("lease")


class TestCreateAndRead:
    """Tests for create / get / list / filter."""

    def test_create_assigns_id_and_timestamps(self, app) -> None:
        prop = create_entity("property", {"title": "Loft", "address": "1 Main St", "price": "450000"})
        assert prop.id is not None
        assert prop.created_at is not None
        assert prop.price == 450000.0
        assert get_entity("property", prop.id).title == "Loft"

    def test_read_only_fields_ignored(self, app) -> None:
        prop = create_entity("property", {"id": 999, "title": "Loft", "address": "1 Main St", "price": 1})
        assert prop.id != 999

    def test_unknown_field_rejected(self, app) -> None:
        with pytest.raises(InvalidQueryError):
            create_entity("client", {"name": "Ann", "favourite_color": "blue"})

    def test_missing_required_fields_rejected(self, app) -> None:
        with pytest.raises(InvalidQueryError, match="address, price"):
            create_entity("property", {"title": "No address or price"})
        assert list_entities("property") == []

    def test_update_cannot_blank_required_field(self, sample_records) -> None:
        reminder = sample_records["reminders"]["upcoming"]
        with pytest.raises(InvalidQueryError):
            update_entity("reminder", reminder.id, {"due_date": ""})
        assert get_entity("reminder", reminder.id).due_date is not None

    def test_get_missing(self, app) -> None:
        with pytest.raises(EntityNotFoundError):
            get_entity("client", 12345)

    def test_find_missing_is_none(self, app) -> None:
        assert find_entity("client", 12345) is None
        assert find_entity("client", "") is None

    def test_list_sort_and_limit(self, app) -> None:
        for title, price in (("B", 300), ("A", 100), ("C", 200)):
            create_entity("property", {"title": title, "address": "x", "price": price})

        assert [p.title for p in list_entities("property", sort="title")] == ["A", "B", "C"]
        assert [p.price for p in list_entities("property", sort="-price")] == [300, 200, 100]
        assert len(list_entities("property", sort="title", limit=2)) == 2
        assert list_entities("property", limit=0) == []

    def test_default_order_is_insertion(self, app) -> None:
        ids = [create_entity("client", {"name": n}).id for n in ("Zoe", "Amy")]
        assert [c.id for c in list_entities("client")] == ids

    def test_bad_sort_field(self, app) -> None:
        with pytest.raises(InvalidQueryError):
            list_entities("client", sort="-shoe_size")

    def test_filter_by_equality(self, sample_records) -> None:
        seller = sample_records["seller"]
        owned = filter_entities("property", {"owner_client_id": seller.id})
        assert [p.title for p in owned] == ["Sunny Loft"]
        assert filter_entities("property", {"status": "sold"}) == []

    def test_filter_coerces_query_string_values(self, sample_records) -> None:
        seller_id = str(sample_records["seller"].id)
        assert len(filter_entities("properties", {"owner_client_id": seller_id})) == 1


class TestMutations:
    """Tests for update / delete."""

    def test_update_partial(self, sample_records) -> None:
        loft = sample_records["loft"]
        update_entity("property", loft.id, {"status": "sold"})
        refreshed = get_entity("property", loft.id)
        assert refreshed.status == "sold"
        assert refreshed.title == "Sunny Loft"

    def test_update_missing(self, app) -> None:
        with pytest.raises(EntityNotFoundError):
            update_entity("reminder", 404, {"status": "completed"})

    def test_delete(self, sample_records) -> None:
        flat_id = sample_records["flat"].id
        delete_entity("property", flat_id)
        with pytest.raises(EntityNotFoundError):
            get_entity("property", flat_id)

    def test_delete_leaves_dangling_references(self, sample_records) -> None:
        """References are plain ids; deleting a client keeps its commissions."""
        buyer_id = sample_records["buyer"].id
        delete_entity("client", buyer_id)
        commission = get_entity("commission", sample_records["commission"].id)
        assert commission.client_id == buyer_id
        assert find_entity("client", commission.client_id) is None

    def test_commission_amount_recalculated(self, app) -> None:
        c = create_entity("commission", {"deal_value": 250000, "commission_rate": 3})
        assert c.commission_amount == 7500.0

        update_entity("commission", c.id, {"commission_rate": 2})
        assert get_entity("commission", c.id).commission_amount == 5000.0

    def test_commission_amount_kept_without_rate(self, app) -> None:
        c = create_entity("commission", {"deal_value": 250000, "commission_rate": 0, "commission_amount": 1200})
        assert c.commission_amount == 1200.0


class TestCoercion:
    """Tests for coerce_value."""

    def _col(self, model, name):
        return model.__table__.columns[name]

    def test_empty_strings(self) -> None:
        assert coerce_value(self._col(Property, "price"), "") is None
        assert coerce_value(self._col(Property, "title"), "") == ""

    def test_numbers(self) -> None:
        assert coerce_value(self._col(Property, "bedrooms"), "3") == 3
        assert coerce_value(self._col(Property, "price"), "1250000.50") == 1250000.5

    def test_dates(self) -> None:
        assert coerce_value(self._col(Property, "contract_end_date"), "2026-11-01") == date(2026, 11, 1)
        assert coerce_value(self._col(Commission, "closing_date"), datetime(2026, 11, 1, 9)) == date(2026, 11, 1)

    def test_bad_number(self) -> None:
        with pytest.raises(InvalidQueryError):
            coerce_value(self._col(Property, "price"), "cheap")

    @pytest.mark.parametrize("column, value", [
        ("price", "nan"), ("price", "inf"), ("latitude", float("-inf")), ("bedrooms", "inf"), ("bedrooms", "NaN"),
    ])
    def test_non_finite_numbers_rejected(self, column, value) -> None:
        with pytest.raises(InvalidQueryError):
            coerce_value(self._col(Property, column), value)

    def test_json_must_be_collection(self) -> None:
        assert coerce_value(self._col(Property, "features"), ["Pool"]) == ["Pool"]
        with pytest.raises(InvalidQueryError):
            coerce_value(self._col(Property, "features"), "Pool")


class TestUploads:
    """Tests for local-folder and R2 uploads."""

    def test_upload_saves_to_folder(self, app) -> None:
        file = FileStorage(stream=io.BytesIO(b"\x89PNG data"), filename="front door.png", content_type="image/png")
        with app.test_request_context():
            result = upload_file(file)

        assert result["url"].startswith("/uploads/")
        assert result["url"].endswith("_front_door.png")
        saved = os.listdir(app.config["UPLOAD_FOLDER"])
        assert len(saved) == 1

    def test_rejects_disallowed_extension(self, app) -> None:
        file = FileStorage(stream=io.BytesIO(b"MZ"), filename="setup.exe")
        with app.test_request_context(), pytest.raises(UploadError):
            upload_file(file)

    def test_rejects_missing_filename(self, app) -> None:
        with app.test_request_context(), pytest.raises(UploadError):
            upload_file(FileStorage(stream=io.BytesIO(b""), filename=""))

    def test_upload_to_r2_when_bucket_configured(self, app, monkeypatch) -> None:
        puts = []

        class FakeS3:
            def put_object(self, **kwargs):
                puts.append(kwargs)

        monkeypatch.setattr(r2_storage, "_r2_client", lambda: FakeS3())
        app.config.update(R2_BUCKET="listings", R2_PUBLIC_BASE_URL="https://cdn.realtymvp.com/")

        file = FileStorage(stream=io.BytesIO(b"%PDF"), filename="deed.pdf", content_type="application/pdf")
        with app.test_request_context():
            result = upload_file(file, subdir="documents")

        assert len(puts) == 1
        assert puts[0]["Bucket"] == "listings"
        assert puts[0]["Key"].startswith("documents/")
        assert puts[0]["ContentType"] == "application/pdf"
        assert result["url"] == "https://cdn.realtymvp.com/" + puts[0]["Key"]
        assert not os.path.exists(app.config["UPLOAD_FOLDER"])

    def test_r2_failure_raises_upload_error(self, app, monkeypatch) -> None:
        class BrokenS3:
            def put_object(self, **kwargs):
                raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")

        monkeypatch.setattr(r2_storage, "_r2_client", lambda: BrokenS3())
        app.config["R2_BUCKET"] = "listings"

        file = FileStorage(stream=io.BytesIO(b"img"), filename="front.jpg")
        with app.test_request_context(), pytest.raises(UploadError):
            upload_file(file)


class TestDiscardUploads:
    """Tests for discard_uploads."""

    def test_removes_local_file(self, app) -> None:
        file = FileStorage(stream=io.BytesIO(b"img"), filename="kitchen.jpg")
        with app.test_request_context():
            url = upload_file(file)["url"]
        discard_uploads([url, "/uploads/never_saved.jpg", ""])
        assert os.listdir(app.config["UPLOAD_FOLDER"]) == []

    def test_removes_r2_object(self, app, monkeypatch) -> None:
        deleted = []

        class FakeS3:
            def delete_object(self, **kwargs):
                deleted.append(kwargs)

        monkeypatch.setattr(r2_storage, "_r2_client", lambda: FakeS3())
        app.config.update(R2_BUCKET="listings", R2_PUBLIC_BASE_URL="https://cdn.realtymvp.com")

        discard_uploads(["https://cdn.realtymvp.com/properties/a1_front.jpg", "https://elsewhere.net/x.jpg"])
        assert deleted == [{"Bucket": "listings", "Key": "properties/a1_front.jpg"}]

    def test_r2_errors_are_logged_not_raised(self, app, monkeypatch, caplog) -> None:
        class BrokenS3:
            def delete_object(self, **kwargs):
                raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "DeleteObject")

        monkeypatch.setattr(r2_storage, "_r2_client", lambda: BrokenS3())
        app.config["R2_BUCKET"] = "listings"

        discard_uploads(["properties/a1_front.jpg"])
        assert "Could not delete R2 key properties/a1_front.jpg" in caplog.text
