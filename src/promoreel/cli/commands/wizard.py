"""Wizard command: the interactive four-stage promo video workflow."""

import asyncio
import shutil
from pathlib import Path

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from promoreel.assets import UploadedFile
from promoreel.cli.ui.console import (
    BRAND_COLOR,
    console,
    print_error,
    print_header,
    print_info,
    print_markdown,
    print_muted,
    print_success,
    print_warning,
)
from promoreel.cli.ui.progress import spinner, styled
from promoreel.cli.ui.prompts import confirm_action, prompt_secret, prompt_user_input
from promoreel.cli.ui.setup import load_settings_or_exit, require_idea_key
from promoreel.core import KeyCredentialGate, WorkflowController
from promoreel.errors import (
    GenerationInProgressError,
    InputValidationError,
    UploadQuotaError,
    WorkflowError,
)
from promoreel.models.generation import FailureKind, GenerationOutcome
from promoreel.state import WorkflowStage

_REFINE_FIELDS = {
    "style": "styles",
    "environment": "environments",
    "lighting": "lightings",
    "details": "details",
}

_ASSETS_HELP = (
    "s <n..> select/deselect images | u <path..> upload | d <n> delete upload | "
    "f <n> toggle feature | e edit description | a <ratio> aspect ratio | "
    "i generate ideas | q quit"
)
_IDEAS_HELP = "<n> use idea | r new ideas | n start over | q quit"
_REFINE_HELP = (
    "<field> <n> pick option | <field> <text> custom value | duration <s> | "
    "retry reload suggestions | g continue | n start over | q quit"
)
_GENERATE_HELP = (
    "g generate | p edit prompt | a <ratio> aspect ratio | s <n..> select images | "
    "n start over | q quit"
)


class _Quit(Exception):
    pass


def wizard(
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
    output_dir: str | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for finished videos. Overrides config.",
    ),
) -> None:
    """Create a promotional video step by step.

    Select product images, generate three video ideas with Claude, refine
    the chosen idea, then generate the video with Veo. Finished videos are
    saved to the output directory.

    Requires: ANTHROPIC_API_KEY. GEMINI_API_KEY is asked for when missing.
    """
    settings = load_settings_or_exit(config_file)
    if not require_idea_key(settings):
        raise typer.Exit(code=1)

    async def ask_for_key() -> str:
        return prompt_secret("Gemini API key: ")

    gate = KeyCredentialGate(settings.api.gemini_api_key, prompt=ask_for_key)
    controller = WorkflowController.from_settings(settings, gate)
    destination = Path(output_dir or settings.output_dir)

    print_header("PromoReel: AI Promo Video Wizard")
    try:
        asyncio.run(_run(controller, gate, destination))
    except KeyboardInterrupt:
        console.print("\n")
        print_warning("Wizard interrupted.")
    finally:
        controller.close()


async def _run(
    controller: WorkflowController, gate: KeyCredentialGate, destination: Path
) -> None:
    with spinner("Loading product images..."):
        await controller.load_assets()

    stages = {
        WorkflowStage.ASSETS: _assets_stage,
        WorkflowStage.IDEAS: _ideas_stage,
        WorkflowStage.REFINE: _refine_stage,
    }
    while True:
        _show_feedback(controller)
        try:
            if controller.stage == WorkflowStage.GENERATE:
                await _generate_stage(controller, gate, destination)
            else:
                await stages[controller.stage](controller)
        except _Quit:
            print_muted("Bye.")
            return
        except (InputValidationError, WorkflowError) as exc:
            print_error(str(exc))


def _show_feedback(controller: WorkflowController) -> None:
    state = controller.state
    if state.notice:
        print_warning(state.notice)
    if state.error:
        print_error(state.error)
    controller.state = state.model_copy(update={"error": None, "notice": None})


def _read_command(stage: WorkflowStage, help_text: str) -> tuple[str, str]:
    print_muted(help_text)
    line = prompt_user_input(f"{stage.value}> ")
    command, _, rest = line.partition(" ")
    command = command.lower()
    if command == "q":
        raise _Quit()
    return command, rest.strip()


def _numbers(text: str) -> list[int]:
    try:
        return [int(part) for part in text.split()]
    except ValueError:
        raise InputValidationError(f"Expected numbers, got: {text!r}") from None


def _asset_id(controller: WorkflowController, number: int) -> str:
    assets = controller.registry.assets
    if not 1 <= number <= len(assets):
        raise InputValidationError(f"No image number {number}.")
    return assets[number - 1].id


def _toggle_assets(controller: WorkflowController, arg: str) -> None:
    for number in _numbers(arg):
        controller.toggle_asset(_asset_id(controller, number))


# ----------------------------------------------------------------------
# Stage views
# ----------------------------------------------------------------------


def _show_assets(controller: WorkflowController) -> None:
    registry = controller.registry
    selection = registry.selection
    table = Table(title="Product Images", title_style=BRAND_COLOR)
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Origin")
    table.add_column("Selected", justify="center")
    for number, asset in enumerate(registry.assets, start=1):
        mark = str(selection.index(asset.id) + 1) if asset.id in selection else ""
        table.add_row(str(number), escape(asset.name or asset.id), asset.origin.value, mark)
    console.print(table)
    print_muted(
        f"{len(selection)}/{registry.settings.max_selection} selected, "
        f"{registry.remaining_uploads} uploads left, "
        f"aspect ratio {controller.state.aspect_ratio}"
    )

    features = controller.settings.product.features
    chosen = controller.state.selected_features
    console.print("[bold]Feature focus:[/bold]")
    for number, feature in enumerate(features, start=1):
        mark = "x" if feature in chosen else " "
        console.print(f"  \\[{mark}] {number}. {escape(feature)}")


async def _assets_stage(controller: WorkflowController) -> None:
    _show_assets(controller)
    command, arg = _read_command(WorkflowStage.ASSETS, _ASSETS_HELP)

    if command == "s":
        _toggle_assets(controller, arg)
    elif command == "u":
        _upload(controller, arg)
    elif command == "d":
        for asset_id in [_asset_id(controller, number) for number in _numbers(arg)]:
            removed = controller.remove_asset(asset_id)
            if removed is not None:
                print_success(f"Removed {removed.name or removed.id}")
    elif command == "f":
        features = controller.settings.product.features
        for number in _numbers(arg):
            if not 1 <= number <= len(features):
                raise InputValidationError(f"No feature number {number}.")
            controller.toggle_feature(features[number - 1])
    elif command == "e":
        print_muted(f"Current: {controller.state.description}")
        text = prompt_user_input("New description (empty keeps current): ")
        if text:
            controller.set_description(text)
    elif command == "a":
        controller.set_aspect_ratio(_aspect_ratio(arg))
    elif command == "i":
        with spinner("Generating video ideas..."):
            await controller.generate_ideas()
    elif command:
        print_warning(f"Unknown command: {command}")


def _upload(controller: WorkflowController, arg: str) -> None:
    files: list[UploadedFile] = []
    for raw in arg.split():
        path = Path(raw).expanduser()
        if not path.is_file():
            print_error(f"File not found: {path}")
            continue
        files.append(UploadedFile.from_path(path))
    if not files:
        return
    try:
        added = controller.upload(files)
    except UploadQuotaError as exc:
        added = exc.added
        print_error(str(exc))
    skipped = len(files) - len([f for f in files if f.is_image])
    if skipped:
        print_warning(f"Skipped {skipped} non-image files.")
    if added:
        print_success(f"Uploaded {len(added)} images.")


def _aspect_ratio(arg: str) -> str:
    if arg not in ("16:9", "9:16"):
        raise InputValidationError("Aspect ratio must be 16:9 or 9:16.")
    return arg


def _start_over(controller: WorkflowController) -> None:
    if confirm_action("Start over? Ideas, choices and the prompt will be discarded."):
        controller.reset()


async def _ideas_stage(controller: WorkflowController) -> None:
    concepts = controller.state.concepts
    for number, concept in enumerate(concepts, start=1):
        console.print(
            Panel(
                f"{escape(concept.description)}\n\n"
                f"[bold]Visuals:[/bold] {escape(concept.visuals)}",
                title=f"{number}. {escape(concept.title)}",
                title_align="left",
                border_style=BRAND_COLOR,
            )
        )
    command, _ = _read_command(WorkflowStage.IDEAS, _IDEAS_HELP)

    if command.isdigit():
        number = int(command)
        if not 1 <= number <= len(concepts):
            raise InputValidationError(f"No idea number {number}.")
        concept = concepts[number - 1]
        with spinner("Refining concept with AI suggestions..."):
            await controller.choose_concept(concept)
    elif command == "r":
        with spinner("Generating new video ideas..."):
            await controller.generate_ideas()
    elif command == "n":
        _start_over(controller)
    elif command:
        print_warning(f"Unknown command: {command}")


def _show_refinement(controller: WorkflowController) -> None:
    state = controller.state
    concept = state.active_concept
    if concept is not None:
        print_header(f"Refine: {concept.title}")
    suggestions = state.suggestions
    if suggestions is not None:
        for field, attr in _REFINE_FIELDS.items():
            options = getattr(suggestions, attr)
            rendered = " | ".join(
                f"{number}. {escape(option)}" for number, option in enumerate(options, start=1)
            )
            console.print(f"[bold]{field}[/bold]: {rendered}")
        print_muted(f"Recommended duration: {suggestions.recommended_duration}s")
    else:
        print_muted("No AI suggestions loaded; write your own values or 'retry'.")

    custom = set(controller.custom_choices())
    choices = state.choices
    console.print("[bold]Current choices:[/bold]")
    for field in _REFINE_FIELDS:
        value = getattr(choices, field) or "-"
        tag = " [dim](custom)[/dim]" if field in custom else ""
        console.print(f"  {field}: {escape(value)}{tag}")
    console.print(f"  duration: {choices.duration_seconds}s")


async def _refine_stage(controller: WorkflowController) -> None:
    _show_refinement(controller)
    command, arg = _read_command(WorkflowStage.REFINE, _REFINE_HELP)

    if command in _REFINE_FIELDS:
        controller.update_choices(**{command: _refinement_value(controller, command, arg)})
    elif command == "duration":
        try:
            seconds = int(arg)
        except ValueError:
            raise InputValidationError("Duration must be a whole number of seconds.") from None
        controller.update_choices(duration_seconds=seconds)
    elif command == "retry":
        with spinner("Loading AI suggestions..."):
            await controller.load_suggestions()
    elif command == "g":
        controller.proceed_to_generate()
    elif command == "n":
        _start_over(controller)
    elif command:
        print_warning(f"Unknown command: {command}")


def _refinement_value(controller: WorkflowController, field: str, arg: str) -> str:
    suggestions = controller.state.suggestions
    if suggestions is not None and arg.isdigit():
        options = getattr(suggestions, _REFINE_FIELDS[field])
        number = int(arg)
        if not 1 <= number <= len(options):
            raise InputValidationError(f"No {field} option {number}.")
        return options[number - 1]
    return arg


async def _generate_stage(
    controller: WorkflowController, gate: KeyCredentialGate, destination: Path
) -> None:
    state = controller.state
    console.print(
        Panel(escape(state.prompt), title="Video Prompt", title_align="left", border_style=BRAND_COLOR)
    )
    selected = controller.registry.selected_assets()
    names = ", ".join(asset.name or asset.id for asset in selected) or "none"
    print_muted(f"Images: {names} | aspect ratio {state.aspect_ratio}")

    command, arg = _read_command(WorkflowStage.GENERATE, _GENERATE_HELP)

    if command == "g":
        await _generate(controller, gate, destination)
    elif command == "p":
        text = prompt_user_input("New prompt (empty keeps current): ")
        if text:
            controller.edit_prompt(text)
    elif command == "a":
        controller.set_aspect_ratio(_aspect_ratio(arg))
    elif command == "s":
        _show_assets(controller)
        if arg:
            _toggle_assets(controller, arg)
    elif command == "n":
        _start_over(controller)
    elif command:
        print_warning(f"Unknown command: {command}")


async def _generate(
    controller: WorkflowController, gate: KeyCredentialGate, destination: Path
) -> None:
    if not gate.has_credential and not await gate.request_credential_selection():
        print_error("A Gemini API key is required to generate videos.")
        return

    try:
        with spinner("Initiating video generation...") as status:
            controller.orchestrator.on_status = lambda message: status.update(styled(message))
            outcome = await controller.generate_video()
    except GenerationInProgressError as exc:
        print_error(str(exc))
        return
    except InputValidationError:
        return
    finally:
        controller.orchestrator.on_status = None

    _report(controller, outcome, destination)


def _report(
    controller: WorkflowController, outcome: GenerationOutcome, destination: Path
) -> None:
    controller.state = controller.state.model_copy(update={"error": None})
    if outcome.succeeded and outcome.video_locator:
        destination.mkdir(parents=True, exist_ok=True)
        target = destination / f"promo-{outcome.job_id[:8]}.mp4"
        shutil.copyfile(outcome.video_locator, target)
        print_success(f"Video saved: {target}")
        print_info("Generate again, edit the prompt, or 'n' to start over.")
        return
    if outcome.failure_kind == FailureKind.QUOTA_EXCEEDED:
        print_markdown(outcome.message, border_style="yellow")
    elif outcome.failure_kind is not None:
        print_error(outcome.message)
    if outcome.requires_new_credential:
        print_info("You will be asked for a new Gemini API key on the next attempt.")
