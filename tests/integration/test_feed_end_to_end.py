# tests/integration/test_feed_end_to_end.py
from __future__ import annotations

import pytest

from reelview.schemas.models import EmbedMedia, PictureMedia, VideoMedia
from reelview.viewer.state_machine import Advance, Retry, SetIndex, ViewerStateMachine
from tests.utils import (
    ManualScheduler,
    ScriptedFetcher,
    make_entry,
    make_gallery_item,
    make_page,
    make_payload,
    make_picture_entry,
    make_video_entry,
)

pytestmark = pytest.mark.integration


def _viewer(pages: list) -> tuple[ViewerStateMachine, ScriptedFetcher]:
    fetcher = ScriptedFetcher(pages)
    vm = ViewerStateMachine(fetcher, ManualScheduler(), path="r/pics")
    return vm, fetcher


def test_two_pages_append_in_order() -> None:
    page1 = make_page(
        [
            make_picture_entry("a1", "https://i.redd.it/a1.jpg"),
            make_picture_entry("b1", "https://i.redd.it/b1.jpg"),
            make_picture_entry("c1", "https://i.redd.it/c1.jpg"),
        ]
    )
    page2 = make_page(
        [
            make_video_entry("a2", "https://v.redd.it/a2.mp4"),
            make_video_entry("c2", "https://v.redd.it/c2.mp4"),
        ]
    )
    vm, fetcher = _viewer([page1, page2])

    vm.start()
    assert vm.current_index == 0
    assert len(vm.buffer) == 3

    # 2 remaining < 50 // 3: the next page is pulled in right away
    vm.dispatch(Advance())
    assert vm.current_index == 1
    assert len(vm.buffer) == 5
    assert fetcher.urls[0] == "https://www.reddit.com/r/pics/.json?limit=50"
    assert "&after=c1" in fetcher.urls[1]
    assert vm.buffer.cursor == "c2"

    kinds = [type(i.media) for i in vm.buffer]
    assert kinds == [PictureMedia, PictureMedia, PictureMedia, VideoMedia, VideoMedia]
    assert vm.buffer[4].media.url == "https://v.redd.it/c2.mp4"


def test_mixed_page_keeps_entry_order_and_fans_out_galleries() -> None:
    gallery = make_entry(
        payload=make_payload(
            name="t3_gal",
            title="gallery",
            media_metadata={
                "m1": make_gallery_item("https://preview.redd.it/m1.jpg?width=1080&amp;s=x", 1080),
                "m2": make_gallery_item("https://preview.redd.it/m2.jpg?width=1080&amp;s=y", 1080),
            },
        )
    )
    embed = make_entry(
        payload=make_payload(
            name="t3_emb",
            title="embed",
            secure_media_embed={
                "content": "&lt;iframe src=\"https://www.redditmedia.com/mediaembed/emb?a=1&amp;b=2\"&gt;&lt;/iframe&gt;",
                "width": 600,
                "height": 338,
                "scrolling": False,
            },
        )
    )
    text_post = make_entry(payload=make_payload(name="t3_txt", title="just text"))
    comment = make_entry(kind="t1", payload=make_payload(name="t1_cmt"))

    vm, _ = _viewer([make_page([gallery, text_post, embed, comment])])
    vm.start()

    titles = [i.title for i in vm.buffer]
    assert titles == ["gallery", "gallery", "embed"]
    assert vm.buffer[0].media.url == "https://preview.redd.it/m1.jpg?width=1080&s=x"
    emb = vm.buffer[2].media
    assert isinstance(emb, EmbedMedia)
    assert emb.url == "https://www.redditmedia.com/mediaembed/emb?a=1&b=2"
    assert emb.scrolling == "no"
    # the cursor comes from the last entry, even a skipped one
    assert vm.buffer.cursor == "t1_cmt"


def test_failure_then_retry_resumes_from_same_cursor() -> None:
    page1 = make_page([make_picture_entry(f"t3_{i}", f"https://i.redd.it/{i}.jpg") for i in range(3)])
    page2 = make_page([make_picture_entry("t3_late", "https://i.redd.it/late.jpg")])
    vm, fetcher = _viewer([page1, ConnectionError("offline"), page2])

    vm.start()
    vm.dispatch(SetIndex(2))
    assert vm.failed
    assert len(vm.buffer) == 3

    vm.dispatch(Advance())
    assert len(fetcher.urls) == 2

    assert vm.dispatch(Retry()) is True
    assert not vm.failed
    assert len(vm.buffer) == 4
    assert fetcher.urls[1] == fetcher.urls[2]
    assert fetcher.urls[2].endswith("&after=t3_2")
