"""Unit tests for the workflow controller.

The controller is exercised against ``FakeGateway``; coroutines are driven
with ``asyncio.run`` so the tests need no async plugin.
"""

import asyncio
from unittest.mock import patch

import pytest
from PIL import Image

from postcraft.core.catalog import AspectRatio, ColorPalette, Font, QuotePosition
from postcraft.core.gateway import EditError, GenerationError, HashtagError, QuoteError
from postcraft.core.prompt_builder import DEFAULT_EDIT_INSTRUCTION, HASHTAG_FALLBACK_CONTEXT
from postcraft.ui.models import (
    ImageSource,
    OriginImage,
    Session,
    Stage,
    WorkflowMode,
    WorkflowStage,
)
from postcraft.ui.state import (
    EDIT_ERROR,
    GENERATE_ERROR,
    HASHTAG_ERROR,
    QUOTE_ERROR,
    UPLOAD_ERROR,
    WorkflowController,
)
from postcraft.ui.validation import PreconditionError

from conftest import make_encoded


@pytest.fixture
def ready_session() -> Session:
    """Session holding an uploaded image, ready for editing."""
    image = make_encoded("red")
    return Session(
        mode=WorkflowMode.UPLOAD,
        origin=OriginImage(ImageSource.UPLOAD, image, filename="photo.png"),
        working_image=image,
        stage=WorkflowStage.READY,
    )


@pytest.fixture
def edited_session(ready_session: Session) -> Session:
    ready_session.edited_image = make_encoded("green")
    ready_session.stage = WorkflowStage.EDITED
    return ready_session


class TestStartOver:
    def test_clears_everything(self, edited_session, fake_gateway):
        edited_session.quote = "Q"
        edited_session.hashtags = ["a"]
        edited_session.instruction = "brighten"
        edited_session.watermark = "@me"
        edited_session.error = "old error"
        edited_session.loading.quote = True
        controller = WorkflowController(edited_session, fake_gateway)

        controller.start_over()

        s = controller.session
        assert s.mode is None
        assert s.origin is None
        assert s.working_image is None
        assert s.edited_image is None
        assert s.quote == ""
        assert s.hashtags == []
        assert s.instruction == ""
        assert s.watermark == ""
        assert s.error is None
        assert not s.loading.any()
        assert s.stage is WorkflowStage.IDLE

    def test_bumps_epoch(self, session, fake_gateway):
        controller = WorkflowController(session, fake_gateway)
        controller.start_over()
        controller.start_over()
        assert session.epoch == 2

    def test_keeps_style_selection(self, session, fake_gateway):
        controller = WorkflowController(session, fake_gateway)
        controller.set_style(font=Font.CAVEAT)
        controller.start_over()
        assert session.style.font is Font.CAVEAT


class TestSimpleIntents:
    def test_select_mode(self, session, fake_gateway):
        controller = WorkflowController(session, fake_gateway)
        controller.select_mode(WorkflowMode.GENERATE)
        assert session.mode is WorkflowMode.GENERATE
        assert session.stage is WorkflowStage.IDLE

    def test_dismiss_error(self, session, fake_gateway):
        session.error = "boom"
        WorkflowController(session, fake_gateway).dismiss_error()
        assert session.error is None

    def test_apply_preset(self, session, fake_gateway):
        controller = WorkflowController(session, fake_gateway)
        controller.apply_preset("Retro Filter")
        assert "retro" in session.instruction.lower()

    def test_unknown_preset_raises(self, session, fake_gateway):
        with pytest.raises(KeyError):
            WorkflowController(session, fake_gateway).apply_preset("Sepia")

    def test_set_style_partial(self, session, fake_gateway):
        controller = WorkflowController(session, fake_gateway)
        controller.set_style(palette=ColorPalette.GOLDEN_HOUR)

        assert session.style.palette is ColorPalette.GOLDEN_HOUR
        assert session.style.font is Font.default()
        assert session.style.position is QuotePosition.default()

    def test_set_quote_clears_hashtags(self, edited_session, fake_gateway):
        edited_session.quote = "old"
        edited_session.hashtags = ["a"]
        edited_session.stage = WorkflowStage.HASHTAGS_READY

        WorkflowController(edited_session, fake_gateway).set_quote("new")

        assert edited_session.quote == "new"
        assert edited_session.hashtags == []
        assert edited_session.stage is WorkflowStage.EDITED

    def test_set_same_quote_keeps_hashtags(self, edited_session, fake_gateway):
        edited_session.quote = "same"
        edited_session.hashtags = ["a"]

        WorkflowController(edited_session, fake_gateway).set_quote("same")

        assert edited_session.hashtags == ["a"]


class TestUploadImage:
    def test_success(self, session, fake_gateway, sample_image_path):
        controller = WorkflowController(session, fake_gateway)

        result = asyncio.run(controller.upload_image(sample_image_path))

        assert result.ok
        assert session.stage is WorkflowStage.READY
        assert session.mode is WorkflowMode.UPLOAD
        assert session.origin.is_upload
        assert session.origin.filename == "sample.png"
        assert session.working_image == session.origin.image
        assert session.working_image.mime_type == "image/png"
        assert fake_gateway.calls == []

    def test_unreadable_file(self, session, fake_gateway, temp_dir):
        bad = temp_dir / "bad.png"
        bad.write_text("not an image")
        controller = WorkflowController(session, fake_gateway)

        result = asyncio.run(controller.upload_image(bad))

        assert not result.ok
        assert session.error == UPLOAD_ERROR
        assert session.stage is WorkflowStage.IDLE
        assert session.mode is WorkflowMode.UPLOAD
        assert session.working_image is None

    def test_oversized_image_is_stage_error(self, session, fake_gateway, sample_image_path):
        controller = WorkflowController(session, fake_gateway)
        with patch(
            "postcraft.ui.state.encode_image_file",
            side_effect=Image.DecompressionBombError("too many pixels"),
        ):
            result = asyncio.run(controller.upload_image(sample_image_path))

        assert isinstance(result.error, Image.DecompressionBombError)
        assert session.error == UPLOAD_ERROR
        assert session.stage is WorkflowStage.IDLE
        assert session.working_image is None

    def test_new_upload_discards_previous_work(self, edited_session, fake_gateway, sample_image_path):
        edited_session.quote = "Q"
        controller = WorkflowController(edited_session, fake_gateway)

        asyncio.run(controller.upload_image(sample_image_path))

        assert edited_session.edited_image is None
        assert edited_session.quote == ""


class TestGenerateImage:
    def test_success(self, session, fake_gateway):
        controller = WorkflowController(session, fake_gateway)
        controller.set_generation_prompt("  a misty fjord  ")
        controller.set_aspect_ratio(AspectRatio.STORY)

        result = asyncio.run(controller.generate_image())

        assert result.ok
        assert fake_gateway.calls == [("generate_image", "a misty fjord", AspectRatio.STORY)]
        assert session.origin.source is ImageSource.GENERATED
        assert session.working_image == fake_gateway.generate_result
        assert session.stage is WorkflowStage.READY
        assert session.mode is WorkflowMode.GENERATE
        assert not session.loading.image_generate

    def test_empty_prompt_refused(self, session, fake_gateway):
        controller = WorkflowController(session, fake_gateway)
        controller.set_generation_prompt("   ")

        result = asyncio.run(controller.generate_image())

        assert isinstance(result.error, PreconditionError)
        assert session.error == "Please enter a prompt to generate an image."
        assert fake_gateway.calls == []

    def test_failure(self, session, fake_gateway):
        fake_gateway.generate_error = GenerationError("nope")
        controller = WorkflowController(session, fake_gateway)
        controller.set_generation_prompt("a fjord")

        result = asyncio.run(controller.generate_image())

        assert isinstance(result.error, GenerationError)
        assert session.error == GENERATE_ERROR
        assert session.stage is WorkflowStage.IDLE
        assert session.working_image is None
        assert not session.loading.image_generate


class TestEditImage:
    def test_requires_image(self, session, fake_gateway):
        result = asyncio.run(WorkflowController(session, fake_gateway).edit_image())

        assert isinstance(result.error, PreconditionError)
        assert session.error == "Please upload or generate an image first."
        assert fake_gateway.calls == []

    def test_default_instruction(self, ready_session, fake_gateway):
        asyncio.run(WorkflowController(ready_session, fake_gateway).edit_image())

        name, data, mime, instruction = fake_gateway.calls[0]
        assert name == "edit_image"
        assert data == ready_session.working_image.data
        assert mime == "image/png"
        assert instruction == DEFAULT_EDIT_INSTRUCTION

    def test_success_stores_result(self, ready_session, fake_gateway):
        ready_session.hashtags = ["stale"]

        result = asyncio.run(WorkflowController(ready_session, fake_gateway).edit_image())

        assert result.ok
        assert ready_session.edited_image == fake_gateway.edit_result
        assert ready_session.hashtags == []
        assert ready_session.stage is WorkflowStage.EDITED
        assert not ready_session.loading.image_edit
        assert ready_session.working_image != ready_session.edited_image

    def test_prompt_includes_quote_and_watermark(self, ready_session, fake_gateway):
        controller = WorkflowController(ready_session, fake_gateway)
        controller.set_instruction("Make it pop")
        controller.set_quote("Adventure awaits")
        controller.set_watermark("@traveler")

        asyncio.run(controller.edit_image())

        instruction = fake_gateway.calls[0][3]
        assert instruction.startswith("Make it pop")
        assert '"Adventure awaits"' in instruction
        assert '"@traveler"' in instruction

    def test_failure_returns_to_ready(self, ready_session, fake_gateway):
        fake_gateway.edit_error = EditError("refused")

        result = asyncio.run(WorkflowController(ready_session, fake_gateway).edit_image())

        assert isinstance(result.error, EditError)
        assert ready_session.error == EDIT_ERROR
        assert ready_session.stage is WorkflowStage.READY
        assert ready_session.edited_image is None
        assert not ready_session.loading.image_edit

    def test_new_edit_clears_error(self, ready_session, fake_gateway):
        ready_session.error = "previous"
        asyncio.run(WorkflowController(ready_session, fake_gateway).edit_image())
        assert ready_session.error is None


class TestEditAgain:
    def test_promotes_edited_image(self, edited_session, fake_gateway):
        edited = edited_session.edited_image
        edited_session.hashtags = ["a"]
        edited_session.instruction = "brighten"

        WorkflowController(edited_session, fake_gateway).edit_again()

        assert edited_session.working_image == edited
        assert edited_session.edited_image is None
        assert edited_session.instruction == ""
        assert edited_session.hashtags == []
        assert edited_session.stage is WorkflowStage.READY

    def test_keeps_origin(self, edited_session, fake_gateway):
        origin = edited_session.origin
        WorkflowController(edited_session, fake_gateway).edit_again()
        assert edited_session.origin is origin

    def test_without_edited_image_is_noop(self, ready_session, fake_gateway):
        working = ready_session.working_image
        WorkflowController(ready_session, fake_gateway).edit_again()
        assert ready_session.working_image == working
        assert ready_session.stage is WorkflowStage.READY


class TestGenerateQuote:
    def test_success(self, session, fake_gateway):
        result = asyncio.run(WorkflowController(session, fake_gateway).generate_quote())

        assert result.ok
        assert session.quote == "Adventure awaits"
        assert not session.loading.quote

    def test_replacing_quote_clears_hashtags(self, edited_session, fake_gateway):
        edited_session.quote = "Old quote"
        edited_session.hashtags = ["old"]
        edited_session.stage = WorkflowStage.HASHTAGS_READY

        asyncio.run(WorkflowController(edited_session, fake_gateway).generate_quote())

        assert edited_session.hashtags == []
        assert edited_session.stage is WorkflowStage.EDITED

    def test_failure_keeps_existing_quote(self, session, fake_gateway):
        session.quote = "Keep me"
        fake_gateway.quote_error = QuoteError("down")

        result = asyncio.run(WorkflowController(session, fake_gateway).generate_quote())

        assert not result.ok
        assert session.quote == "Keep me"
        assert session.error == QUOTE_ERROR
        assert not session.loading.quote


class TestGenerateHashtags:
    def test_precondition_without_quote_or_edit(self, ready_session, fake_gateway):
        result = asyncio.run(WorkflowController(ready_session, fake_gateway).generate_hashtags())

        assert isinstance(result.error, PreconditionError)
        assert ready_session.error == (
            "Please generate an image and a quote first to create relevant hashtags."
        )
        assert fake_gateway.calls == []

    def test_uses_quote_as_context(self, session, fake_gateway):
        session.quote = "Adventure awaits"

        asyncio.run(WorkflowController(session, fake_gateway).generate_hashtags())

        assert fake_gateway.calls == [("generate_hashtags", "Adventure awaits")]
        assert session.hashtags == ["travel", "nature"]

    def test_fallback_context_for_edited_image(self, edited_session, fake_gateway):
        asyncio.run(WorkflowController(edited_session, fake_gateway).generate_hashtags())

        assert fake_gateway.calls == [("generate_hashtags", HASHTAG_FALLBACK_CONTEXT)]
        assert edited_session.stage is WorkflowStage.HASHTAGS_READY

    def test_quote_only_keeps_stage(self, ready_session, fake_gateway):
        ready_session.quote = "Q"
        asyncio.run(WorkflowController(ready_session, fake_gateway).generate_hashtags())
        assert ready_session.stage is WorkflowStage.READY
        assert ready_session.hashtags == ["travel", "nature"]

    def test_dropped_when_quote_edited_in_flight(self, edited_session, fake_gateway):
        edited_session.quote = "Old quote"
        fake_gateway.gate = asyncio.Event()
        controller = WorkflowController(edited_session, fake_gateway)

        async def scenario():
            task = asyncio.create_task(controller.generate_hashtags())
            await asyncio.sleep(0)
            controller.set_quote("New quote")
            fake_gateway.gate.set()
            return await task

        asyncio.run(scenario())

        assert fake_gateway.calls == [("generate_hashtags", "Old quote")]
        assert edited_session.quote == "New quote"
        assert edited_session.hashtags == []
        assert edited_session.stage is WorkflowStage.EDITED
        assert not edited_session.loading.hashtags

    def test_dropped_when_quote_generated_in_flight(self, edited_session, fake_gateway):
        fake_gateway.gate = asyncio.Event()
        controller = WorkflowController(edited_session, fake_gateway)

        async def scenario():
            # Quote is released first, so it lands while hashtags are pending
            quote = asyncio.create_task(controller.generate_quote())
            hashtags = asyncio.create_task(controller.generate_hashtags())
            await asyncio.sleep(0)
            fake_gateway.gate.set()
            await asyncio.gather(quote, hashtags)

        asyncio.run(scenario())

        assert edited_session.quote == "Adventure awaits"
        assert edited_session.hashtags == []

    def test_failure(self, edited_session, fake_gateway):
        fake_gateway.hashtags_error = HashtagError("bad json")

        asyncio.run(WorkflowController(edited_session, fake_gateway).generate_hashtags())

        assert edited_session.error == HASHTAG_ERROR
        assert edited_session.hashtags == []
        assert edited_session.stage is WorkflowStage.EDITED
        assert not edited_session.loading.hashtags


class TestConcurrency:
    def test_busy_stage_refused(self, session, fake_gateway):
        fake_gateway.gate = asyncio.Event()
        controller = WorkflowController(session, fake_gateway)

        async def scenario():
            first = asyncio.create_task(controller.generate_quote())
            await asyncio.sleep(0)
            assert session.loading.quote
            second = await controller.generate_quote()
            fake_gateway.gate.set()
            return await first, second

        first, second = asyncio.run(scenario())

        assert first.ok
        assert isinstance(second.error, PreconditionError)
        assert fake_gateway.call_names() == ["generate_quote"]

    def test_flags_are_independent(self, ready_session, fake_gateway):
        fake_gateway.gate = asyncio.Event()
        controller = WorkflowController(ready_session, fake_gateway)

        async def scenario():
            edit = asyncio.create_task(controller.edit_image())
            quote = asyncio.create_task(controller.generate_quote())
            await asyncio.sleep(0)
            flags = (ready_session.loading.image_edit, ready_session.loading.quote)
            fake_gateway.gate.set()
            await asyncio.gather(edit, quote)
            return flags

        assert asyncio.run(scenario()) == (True, True)
        assert not ready_session.loading.any()
        assert ready_session.quote == "Adventure awaits"
        assert ready_session.edited_image is not None

    def test_stale_edit_discarded_after_start_over(self, ready_session, fake_gateway):
        fake_gateway.gate = asyncio.Event()
        controller = WorkflowController(ready_session, fake_gateway)

        async def scenario():
            task = asyncio.create_task(controller.edit_image())
            await asyncio.sleep(0)
            controller.start_over()
            fake_gateway.gate.set()
            return await task

        result = asyncio.run(scenario())

        assert result.stale
        assert ready_session.edited_image is None
        assert ready_session.stage is WorkflowStage.IDLE
        assert not ready_session.loading.any()

    def test_stale_failure_leaves_no_error(self, ready_session, fake_gateway):
        fake_gateway.gate = asyncio.Event()
        fake_gateway.quote_error = QuoteError("late")
        controller = WorkflowController(ready_session, fake_gateway)

        async def scenario():
            task = asyncio.create_task(controller.generate_quote())
            await asyncio.sleep(0)
            controller.select_mode(WorkflowMode.UPLOAD)
            fake_gateway.gate.set()
            return await task

        result = asyncio.run(scenario())

        assert result.stale
        assert ready_session.error is None

    def test_stale_flag_not_cleared_in_new_epoch(self, ready_session, fake_gateway):
        fake_gateway.gate = asyncio.Event()
        controller = WorkflowController(ready_session, fake_gateway)

        async def scenario():
            old = asyncio.create_task(controller.generate_quote())
            await asyncio.sleep(0)
            controller.start_over()
            # New epoch raises its own quote flag; the old request must not lower it
            ready_session.loading.set(Stage.QUOTE, True)
            fake_gateway.gate.set()
            await old
            return ready_session.loading.quote

        assert asyncio.run(scenario()) is True
        assert ready_session.quote == ""


class TestDownload:
    def test_requires_edited_image(self, ready_session, fake_gateway):
        result = WorkflowController(ready_session, fake_gateway).download()

        assert isinstance(result.error, PreconditionError)
        assert ready_session.error == "There is no edited image to download yet."

    def test_writes_png(self, edited_session, fake_gateway, test_config):
        with patch("postcraft.ui.state.config", test_config):
            result = WorkflowController(edited_session, fake_gateway).download()

        assert result.ok
        assert result.value == test_config.outputs_dir / "ai-generated-post.png"
        assert result.value.exists()
