import pytest

from services.template_source import TemplateSourceService


@pytest.mark.asyncio
async def test_tag_source_updates_template_and_index(memory_backend):
    memory_backend.add_template("tpl-1", "Morning routine hook")
    service = TemplateSourceService(sources=memory_backend)

    assert await service.tag_source("tpl-1", True, "expert-1", notes="Reviewed by editorial") is True

    template = memory_backend.templates["tpl-1"]
    assert template["source_type"] == "expert"
    assert template["source_creator_id"] == "expert-1"
    assert template["source_notes"] == "Reviewed by editorial"
    assert template["source_tagged_at"] is not None
    assert memory_backend.source_index[-1]["source_type"] == "expert"


@pytest.mark.asyncio
async def test_retagging_appends_to_index(memory_backend):
    memory_backend.add_template("tpl-2")
    service = TemplateSourceService(sources=memory_backend)

    await service.tag_source("tpl-2", True, "expert-1")
    await service.tag_source("tpl-2", False, "gen-9")

    assert memory_backend.templates["tpl-2"]["source_type"] == "automated"
    assert [row["source_type"] for row in memory_backend.source_index] == ["expert", "automated"]


@pytest.mark.asyncio
async def test_tag_unknown_template_returns_false(memory_backend):
    service = TemplateSourceService(sources=memory_backend)

    assert await service.tag_source("missing", False, "gen-1") is False
    assert memory_backend.source_index == []


@pytest.mark.asyncio
async def test_tag_store_failure_returns_false(memory_backend, monkeypatch):
    memory_backend.add_template("tpl-3")

    async def _fails(*args, **kwargs):
        raise RuntimeError("write conflict")

    monkeypatch.setattr(memory_backend, "tag", _fails)

    assert await TemplateSourceService(sources=memory_backend).tag_source("tpl-3", True, "e") is False
