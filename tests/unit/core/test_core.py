"""Tests for Core wiring and service lifecycle."""

import asyncio

import pytest

from coffeenotes.config import Config
from coffeenotes.core.core import Core, database_name
from coffeenotes.core.modules.like.service import LikeService
from coffeenotes.core.modules.note.service import NoteService


class TestDatabaseName:
    """Tests for database_name function."""

    def test_path_names_the_database(self):
        assert database_name("mongodb://localhost:27017/coffeenotes") == "coffeenotes"
        assert database_name("mongodb://user:pw@db:27017/notes?authSource=admin") == "notes"

    @pytest.mark.parametrize("url", ["mongodb://localhost:27017", "mongodb://localhost:27017/"])
    def test_missing_database_rejected(self, url):
        with pytest.raises(ValueError, match="must name a database"):
            database_name(url)


class TestCore:
    """Tests for Core construction and lifespan."""

    def test_builds_services_bound_to_core(self, fake_mongo, config):
        core = Core(config)

        assert isinstance(core.services.note, NoteService)
        assert isinstance(core.services.like, LikeService)
        assert core.services.all == (core.services.note, core.services.like)
        assert all(service.core is core for service in core.services.all)
        assert core.database.name == "coffeenotes_test"

    def test_client_decodes_uuids_and_aware_datetimes(self, fake_mongo, config):
        core = Core(config)
        assert core.mongo_client.options == {"uuidRepresentation": "standard", "tz_aware": True}

    def test_lifespan_starts_and_stops_in_order(self, fake_mongo, config, monkeypatch):
        core = Core(config)
        events = []
        for name, service in (("note", core.services.note), ("like", core.services.like)):

            async def on_start(name=name):
                events.append(f"start {name}")

            async def on_stop(name=name):
                events.append(f"stop {name}")

            monkeypatch.setattr(service, "on_start", on_start)
            monkeypatch.setattr(service, "on_stop", on_stop)

        async def run():
            async with core.lifespan():
                events.append("serving")

        asyncio.run(run())
        assert events == ["start note", "start like", "serving", "stop like", "stop note"]
        assert core.mongo_client.closed is True

    def test_unbound_service_has_no_core(self, fake_mongo, config):
        service = NoteService(Core(config).database)
        with pytest.raises(RuntimeError):
            _ = service.core

    def test_bad_url_fails_before_connecting(self, fake_mongo):
        with pytest.raises(ValueError):
            Core(Config(database_url="mongodb://localhost:27017"))
