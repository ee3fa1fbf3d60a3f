import pytest

from studydesk.graph.client import RemoteError
from studydesk.graph.models import Folder, Subfolder
from studydesk.schedule.models import ScheduleRow
from studydesk.services.active_folder import resolve_target_folder
from studydesk.services.date_service import ClockReading
from studydesk.services.folder_tree import FolderTree, RefetchError
from studydesk.services.notes import NoteDraft, prepare_note_for_now, submit_draft

MONDAY_9AM = ClockReading(hour=9, minute=0, weekday=1)


def _rows(subject):
    return [ScheduleRow(time="8:00 - 10:00", cells=[subject, "", "", "", "", "", ""])]


def _root(*subfolders):
    return Folder(
        id="root",
        name="Materials",
        subfolders=[Subfolder(id=folder_id, name=name) for folder_id, name in subfolders],
    )


def test_resolves_matching_subfolder():
    root = _root(("f-math", "Math"), ("f-phys", "Physics"))
    assert resolve_target_folder(_rows("Physics"), MONDAY_9AM, root) == "f-phys"


def test_duplicate_names_pick_first_in_listing_order():
    root = _root(("f-1", "Physics"), ("f-2", "Physics"))
    assert resolve_target_folder(_rows("Physics"), MONDAY_9AM, root) == "f-1"


def test_no_active_subject_is_not_found():
    root = _root(("f-math", "Math"))
    assert resolve_target_folder(_rows(""), MONDAY_9AM, root) is None
    assert resolve_target_folder(_rows("Math"), ClockReading(hour=12, minute=0, weekday=1), root) is None


def test_missing_subfolder_is_not_found():
    assert resolve_target_folder(_rows("History"), MONDAY_9AM, _root(("f-math", "Math"))) is None


def test_name_match_is_exact():
    assert resolve_target_folder(_rows("math"), MONDAY_9AM, _root(("f-math", "Math"))) is None


def test_unloaded_folder_is_not_found():
    assert resolve_target_folder(_rows("Math"), MONDAY_9AM, None) is None


@pytest.mark.asyncio
async def test_note_for_now_is_filed_in_active_folder(folder_service, document_service):
    folder_service.add_folder("f-math", "Math", parent_id="root")
    tree = FolderTree(folder_service, document_service, ["root"])
    await tree.fetch()

    draft = prepare_note_for_now(_rows("Math"), MONDAY_9AM, tree)
    assert draft == NoteDraft(folder_id="f-math")

    draft.text_content = "Limits"
    draft.description = "week 3"
    document = await submit_draft(tree, draft)

    assert document.text_content == "Limits"
    assert draft.text_content == ""
    assert draft.description is None
    assert tree.root.subfolders[0].document_count == 1


@pytest.mark.asyncio
async def test_failed_submit_keeps_draft_for_retry(folder_service, document_service):
    folder_service.add_folder("f-math", "Math", parent_id="root")
    tree = FolderTree(folder_service, document_service, ["root"])
    await tree.fetch()
    draft = NoteDraft(folder_id="f-math", text_content="Limits", description="week 3")
    folder_service.fail_next = RemoteError("service unavailable")

    with pytest.raises(RemoteError):
        await submit_draft(tree, draft)

    assert draft == NoteDraft(folder_id="f-math", text_content="Limits", description="week 3")
    document = await submit_draft(tree, draft)
    assert document.description == "week 3"


@pytest.mark.asyncio
async def test_saved_note_clears_draft_even_if_reload_fails(folder_service, document_service):
    folder_service.add_folder("f-math", "Math", parent_id="root")
    tree = FolderTree(folder_service, document_service, ["root"])
    await tree.fetch()
    before = tree.folders
    draft = NoteDraft(folder_id="f-math", text_content="Limits")
    folder_service.fail_fetch = RemoteError("listing unavailable")

    with pytest.raises(RefetchError) as excinfo:
        await submit_draft(tree, draft)

    assert excinfo.value.result.text_content == "Limits"
    assert draft.text_content == ""
    assert tree.folders is before
    assert [call[0] for call in folder_service.calls].count("create_document") == 1
