"""CreativeService tests: upload → generate → mutate flows with the mock AI backend"""
import asyncio
import io
import random
from unittest.mock import AsyncMock, patch

import pytest
from PIL import Image

from ad_composer.ai import MockCopyGenerator, MockZoneAnalyzer
from ad_composer.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PreconditionFailedError,
    ValidationError,
    ZoneNotFoundError,
)
from ad_composer.models import FORMAT_DIMS, Result, SelectionOptions, Spec
from ad_composer.render.pipeline import Renderer
from ad_composer.service import CreativeService
from ad_composer.storage import LocalStorage
from ad_composer.store import SQLiteStore
from factories import make_safe_zones


@pytest.fixture
def service(catalog, tmp_path):
    store = SQLiteStore(":memory:")
    yield CreativeService(
        catalog=catalog,
        store=store,
        storage=LocalStorage(tmp_path / "storage"),
        zone_analyzer=MockZoneAnalyzer(),
        copy_generator=MockCopyGenerator(),
        renderer=Renderer(catalog, str(tmp_path / "fonts")),
        rng=random.Random(7),
    )
    store.close()


async def _upload(service, product_png):
    return await service.upload_image("product.png", product_png)


async def _generate_one(service, product_png, family="promo"):
    image = await _upload(service, product_png)
    results = await service.generate(image.id, SelectionOptions(families=[family]))
    return image, results[0]


async def _png_size(service, result: Result):
    data = await service.storage.read("generated", result.location)
    return Image.open(io.BytesIO(data)).size


# ── Upload ──────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_upload_stores_original(service, product_png, tmp_path):
    image = await _upload(service, product_png)

    assert image.id.startswith("img_")
    assert (image.width, image.height) == (800, 1000)
    assert image.location == f"/files/uploads/{image.id}.png"
    assert (tmp_path / "storage" / "uploads" / f"{image.id}.png").exists()
    assert service.store.get_image(image.id) == image


@pytest.mark.asyncio
async def test_upload_rejects_non_images(service):
    with pytest.raises(ValidationError):
        await service.upload_image("notes.txt", b"definitely not an image")

    buffer = io.BytesIO()
    Image.new("RGB", (10, 10)).save(buffer, format="GIF")
    with pytest.raises(ValidationError):
        await service.upload_image("anim.gif", buffer.getvalue())


# ── Generate ────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_generate_end_to_end(service, product_png):
    image = await _upload(service, product_png)

    results = await service.generate(image.id, SelectionOptions(families=["promo", "luxury"]))

    assert [r.family_id for r in results] == ["promo", "luxury"]
    assert all(r.active and not r.approved for r in results)
    for result in results:
        spec = service.store.get_spec(result.spec_id)
        assert spec.zone_id in {"A", "B", "C"}
        assert (spec.canvas.w, spec.canvas.h) == (1080, 1350)
        assert await _png_size(service, result) == (1080, 1350)
    assert {r.id for r in service.list_active_results(image.id)} == {r.id for r in results}


@pytest.mark.asyncio
async def test_generate_unknown_image(service):
    with pytest.raises(NotFoundError):
        await service.generate("img_missing", SelectionOptions(families=["promo"]))


@pytest.mark.asyncio
async def test_ai_artifacts_are_generated_once(service, product_png):
    image = await _upload(service, product_png)
    analyze = AsyncMock(side_effect=MockZoneAnalyzer().analyze)
    generate = AsyncMock(side_effect=MockCopyGenerator().generate)

    with (
        patch.object(service.zone_analyzer, "analyze", new=analyze),
        patch.object(service.copy_generator, "generate", new=generate),
    ):
        await asyncio.gather(
            service.get_safe_zones(image.id),
            service.get_safe_zones(image.id),
            service.generate(image.id, SelectionOptions(families=["promo"])),
            service.generate(image.id, SelectionOptions(families=["testimonial"])),
        )

    assert analyze.await_count == 1
    assert generate.await_count == 1


@pytest.mark.asyncio
async def test_recommended_family(service, product_png):
    image = await _upload(service, product_png)
    recommend = AsyncMock(return_value="testimonial")

    with patch.object(service.copy_generator, "recommend_family", new=recommend):
        results = await service.generate(image.id, SelectionOptions(family_mode="recommended"))

    recommend.assert_awaited_once()
    assert [r.family_id for r in results] == ["testimonial"]


# ── Mutations ───────────────────────────────────────────────
@pytest.mark.asyncio
async def test_regenerate_style_supersedes(service, product_png):
    image, original = await _generate_one(service, product_png)

    replacement = await service.regenerate_style(original.id)

    new = replacement.result
    assert replacement.superseded_id == original.id
    assert new.family_id == original.family_id
    assert new.style_id != original.style_id
    assert new.primary_slot_id == original.primary_slot_id
    assert service.store.get_result(original.id).superseded_by == new.id
    assert [r.id for r in service.list_active_results(image.id)] == [new.id]


@pytest.mark.asyncio
async def test_headline_regeneration_never_repeats_within_lineage(service, product_png):
    _, original = await _generate_one(service, product_png)

    first = (await service.regenerate_headline(original.id)).result
    second = (await service.regenerate_headline(first.id)).result

    primaries = [original.primary_slot_id, first.primary_slot_id, second.primary_slot_id]
    assert len(set(primaries)) == 3
    assert second.style_id == original.style_id


@pytest.mark.asyncio
async def test_lineage_has_one_active_member(service, product_png):
    _, original = await _generate_one(service, product_png)

    current = original
    for mutate in (service.regenerate_style, service.regenerate_headline, service.regenerate_style):
        current = (await mutate(current.id)).result

    chain = service.lineage(current.id)
    assert len(chain) == 4
    assert chain[0].id == original.id
    assert chain[-1].id == current.id
    assert [r.active for r in chain] == [False, False, False, True]
    with pytest.raises(NotFoundError):
        service.lineage("rr_missing")


@pytest.mark.asyncio
async def test_mutating_a_superseded_result_is_invalid(service, product_png):
    _, original = await _generate_one(service, product_png)
    await service.regenerate_style(original.id)

    with pytest.raises(InvalidStateError):
        await service.regenerate_headline(original.id)


@pytest.mark.asyncio
async def test_mutating_unknown_result(service):
    with pytest.raises(NotFoundError):
        await service.regenerate_style("rr_missing")


@pytest.mark.asyncio
async def test_mutation_before_analysis_is_a_precondition_failure(service, catalog, product_png):
    image = await _upload(service, product_png)
    style = catalog.get_style("boxed_text")
    spec = Spec(
        id="as_manual",
        image_id=image.id,
        format="4:5",
        language="en",
        family_id="promo",
        style_id="boxed_text",
        zone_id="B",
        primary_slot_id="sl_manual",
        texts={"headline": "Hand-written"},
        theme=style.default_theme,
        canvas=FORMAT_DIMS["4:5"],
    )
    service.store.insert_spec(spec)
    service.store.insert_result(
        Result(
            id="rr_manual",
            spec_id=spec.id,
            image_id=image.id,
            family_id="promo",
            style_id="boxed_text",
            primary_slot_id="sl_manual",
            location="/files/generated/rr_manual.png",
        )
    )

    with pytest.raises(PreconditionFailedError):
        await service.regenerate_headline("rr_manual")


@pytest.mark.asyncio
async def test_concurrent_supersession_is_a_conflict(service, product_png):
    image, original = await _generate_one(service, product_png)

    with patch.object(service.store, "mark_superseded", return_value=False):
        with pytest.raises(ConflictError):
            await service.regenerate_style(original.id)

    assert [r.id for r in service.list_active_results(image.id)] == [original.id]


@pytest.mark.asyncio
async def test_concurrent_mutations_on_one_result(service, product_png):
    image, original = await _generate_one(service, product_png)

    outcomes = await asyncio.gather(
        service.regenerate_style(original.id),
        service.regenerate_headline(original.id),
        return_exceptions=True,
    )

    assert sum(isinstance(o, InvalidStateError) for o in outcomes) == 1
    assert len(service.list_active_results(image.id)) == 1


# ── Language / format switch ────────────────────────────────
@pytest.mark.asyncio
async def test_switch_language_and_format(service, product_png):
    _, original = await _generate_one(service, product_png)

    [replacement] = await service.switch_language_or_format([original.id], language="de", format="1:1")

    spec = service.store.get_spec(replacement.result.spec_id)
    assert spec.language == "de"
    assert (spec.canvas.w, spec.canvas.h) == (1080, 1080)
    assert spec.style_id == original.style_id
    assert await _png_size(service, replacement.result) == (1080, 1080)


@pytest.mark.asyncio
async def test_switch_format_only(service, product_png):
    _, original = await _generate_one(service, product_png, family="testimonial")

    [replacement] = await service.switch_language_or_format([original.id], format="9:16")

    spec = service.store.get_spec(replacement.result.spec_id)
    assert spec.language == "en"
    assert replacement.result.primary_slot_id == original.primary_slot_id
    assert await _png_size(service, replacement.result) == (1080, 1920)


@pytest.mark.asyncio
async def test_switch_validation_lists_every_issue(service):
    with pytest.raises(ValidationError) as exc_info:
        await service.switch_language_or_format([])
    assert len(exc_info.value.issues) == 2

    with pytest.raises(ValidationError) as exc_info:
        await service.switch_language_or_format(["rr_1"], language="xx", format="16:9")
    assert len(exc_info.value.issues) == 2


@pytest.mark.asyncio
async def test_switch_skips_bad_items(service, product_png):
    image = await _upload(service, product_png)
    first, second = await service.generate(
        image.id, SelectionOptions(families=["promo", "testimonial"])
    )
    await service.regenerate_style(second.id)

    replacements = await service.switch_language_or_format(
        [first.id, "rr_missing", second.id], language="es"
    )

    assert [r.superseded_id for r in replacements] == [first.id]


# ── Results ─────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_set_approval(service, product_png):
    _, original = await _generate_one(service, product_png)

    assert service.set_approval(original.id, True).approved is True
    assert service.set_approval(original.id, False).approved is False
    with pytest.raises(NotFoundError):
        service.set_approval("rr_missing", True)


@pytest.mark.asyncio
async def test_clear_images_removes_everything(service, product_png, tmp_path):
    image, original = await _generate_one(service, product_png)
    await service.regenerate_style(original.id)

    await service.clear_images([image.id])

    assert service.store.get_image(image.id) is None
    assert service.store.get_safe_zones(image.id) is None
    assert service.list_active_results(image.id) == []
    assert service.store.list_results(image.id) == []
    assert list((tmp_path / "storage" / "uploads").iterdir()) == []
    assert list((tmp_path / "storage" / "generated").iterdir()) == []


# ── Partial safe zones ──────────────────────────────────────
@pytest.mark.asyncio
async def test_mutations_stay_within_the_image_zones(service, product_png):
    image = await _upload(service, product_png)
    analyze = AsyncMock(return_value=make_safe_zones(image.id, zone_ids=("A", "B")))

    with patch.object(service.zone_analyzer, "analyze", new=analyze):
        results = await service.generate(image.id, SelectionOptions(families=["promo"], style_mode="all"))

    for result in results:
        current = result
        for mutate in (service.regenerate_headline, service.regenerate_style) * 3:
            current = (await mutate(current.id)).result
            assert service.store.get_spec(current.spec_id).zone_id in {"A", "B"}


@pytest.mark.asyncio
async def test_failed_render_leaves_no_spec_behind(service, product_png):
    _, original = await _generate_one(service, product_png)
    spec_count = len(service.store._fetchall("SELECT id FROM specs"))

    with patch.object(
        service.pipeline, "render_and_store", new=AsyncMock(side_effect=ZoneNotFoundError("C"))
    ):
        with pytest.raises(ZoneNotFoundError):
            await service.regenerate_style(original.id)

    assert len(service.store._fetchall("SELECT id FROM specs")) == spec_count
    assert service.store.get_result(original.id).active


# ── Per-result locks ────────────────────────────────────────
@pytest.mark.asyncio
async def test_result_locks_are_released(service, product_png):
    image, original = await _generate_one(service, product_png)

    replacement = await service.regenerate_style(original.id)
    assert original.id not in service._result_locks

    current = replacement.result
    with patch.object(service.store, "mark_superseded", return_value=False):
        with pytest.raises(ConflictError):
            await service.regenerate_headline(current.id)
    assert current.id in service._result_locks

    await service.clear_images([image.id])
    assert not service._result_locks
