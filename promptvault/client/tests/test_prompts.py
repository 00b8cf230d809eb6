from ..prompts import (
    create_prompt_version,
    duplicate_prompt,
    import_from_markdown,
    new_folder,
    new_prompt,
    search_prompts,
    sort_for_display,
    split_pinned,
    touch,
)


def test_new_prompt_has_defaults() -> None:
    prompt = new_prompt(content="Body")

    assert prompt.id
    assert prompt.title == "New Prompt"
    assert prompt.is_pinned is False
    assert prompt.folder_id is None
    assert prompt.versions == []
    assert prompt.created_at == prompt.updated_at


def test_version_history_keeps_five_newest() -> None:
    prompt = new_prompt(title="T", content="c0")
    for index in range(1, 7):
        prompt = create_prompt_version(prompt).model_copy(update={"content": f"c{index}"})

    assert len(prompt.versions) == 5
    assert [version.content for version in prompt.versions] == ["c5", "c4", "c3", "c2", "c1"]
    assert "c0" not in [version.content for version in prompt.versions]


def test_create_prompt_version_does_not_mutate_original() -> None:
    prompt = new_prompt(content="c0")

    snapshot = create_prompt_version(prompt)

    assert prompt.versions == []
    assert snapshot.versions[0].title == prompt.title
    assert snapshot.versions[0].content == "c0"


def test_touch_refreshes_updated_at() -> None:
    prompt = new_prompt(created_at=1, updated_at=1)

    assert touch(prompt).updated_at > 1
    assert touch(prompt).created_at == 1


def test_duplicate_prompt_gets_new_identity() -> None:
    original = create_prompt_version(new_prompt(title="Mail", tags=["a"], created_at=1, updated_at=1))

    copy = duplicate_prompt(original)

    assert copy.id != original.id
    assert copy.title == "Mail (Copy)"
    assert copy.versions == []
    assert copy.created_at > 1
    copy.tags.append("b")
    assert original.tags == ["a"]


def test_import_from_markdown_strips_suffix() -> None:
    prompt = import_from_markdown("Code Review.MD", "# Review")

    assert prompt.title == "Code Review"
    assert prompt.content == "# Review"


def test_new_folder_defaults() -> None:
    folder = new_folder()

    assert folder.name == "New Folder"
    assert folder.icon == "📁"


def test_search_matches_title_content_and_tags_ignoring_case() -> None:
    by_title = new_prompt(title="Weekly Report")
    by_content = new_prompt(title="Mail", content="Write a REPORT summary")
    by_tag = new_prompt(title="Other", tags=["Reporting"])
    unrelated = new_prompt(title="Poem", content="roses", tags=["fun"])
    prompts = [by_title, by_content, by_tag, unrelated]

    assert search_prompts(prompts, "report") == [by_title, by_content, by_tag]
    assert search_prompts(prompts, "") == prompts
    assert search_prompts(prompts, "missing") == []


def test_sort_for_display_puts_pinned_first_then_newest() -> None:
    old_pinned = new_prompt(title="a", is_pinned=True, updated_at=100)
    new_pinned = new_prompt(title="b", is_pinned=True, updated_at=300)
    old = new_prompt(title="c", updated_at=200)
    new = new_prompt(title="d", updated_at=400)

    ordered = sort_for_display([old, old_pinned, new, new_pinned])

    assert [prompt.title for prompt in ordered] == ["b", "a", "d", "c"]


def test_split_pinned_caps_recent_list() -> None:
    pinned = new_prompt(title="pinned", is_pinned=True, updated_at=1)
    recent = [new_prompt(title=f"r{index}", updated_at=index) for index in range(12)]

    pinned_list, recent_list = split_pinned([*recent, pinned])

    assert pinned_list == [pinned]
    assert len(recent_list) == 10
    assert recent_list[0].title == "r11"
    assert recent_list[-1].title == "r2"
