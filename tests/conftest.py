import pytest
import pytest_asyncio
import respx

from chanfetch import ApiConfig, ChanClient, ClientConfig, CooldownConfig

API_BASE = "https://a.4cdn.org"
LM_1 = "Wed, 21 Oct 2015 07:28:00 GMT"
LM_2 = "Wed, 21 Oct 2015 07:29:13 GMT"

INTERVAL = 0.05
COOLDOWN = 0.3


def make_post(no, resto=0, **extra):
    post = {"no": no, "resto": resto, "time": 1445412480 + no % 1000, "now": "10/21/15(Wed)03:28", "name": "Anonymous"}
    post.update(extra)
    return post


def make_thread(op_no, reply_nos=(), **op_extra):
    posts = [make_post(op_no, com="op comment", sub="subject", replies=len(reply_nos), **op_extra)]
    posts += [make_post(no, resto=op_no, com=f"reply {no}") for no in reply_nos]
    return {"posts": posts}


def make_board(slug, title="", ws=1):
    return {
        "board": slug,
        "title": title or slug,
        "ws_board": ws,
        "per_page": 15,
        "pages": 10,
        "max_filesize": 4194304,
        "max_webm_filesize": 3145728,
        "max_comment_chars": 2000,
        "max_webm_duration": 120,
        "bump_limit": 310,
        "image_limit": 150,
        "cooldowns": {"threads": 600, "replies": 60, "images": 60},
        "meta_description": f"/{slug}/ board",
        "is_archived": 1,
    }


def make_catalog(*pages):
    return [
        {"page": i + 1, "threads": [make_post(no, com=f"thread {no}", replies=3, images=1) for no in nos]}
        for i, nos in enumerate(pages)
    ]


def make_threadlist(*pages):
    return [
        {"page": i + 1, "threads": [{"no": no, "last_modified": 1445412480, "replies": 2} for no in nos]}
        for i, nos in enumerate(pages)
    ]


def fast_config(**cooldowns):
    defaults = {"boards": 0.0, "catalog": COOLDOWN, "threads": 0.0, "thread": COOLDOWN, "archive": 0.0}
    defaults.update(cooldowns)
    return ClientConfig(
        api=ApiConfig(api_base=API_BASE, request_interval=INTERVAL, user_agent="chanfetch-tests/1.0"),
        cooldowns=CooldownConfig(**defaults),
    )


@pytest.fixture
def api():
    with respx.mock(base_url=API_BASE, assert_all_called=False) as router:
        yield router


@pytest_asyncio.fixture
async def client():
    c = ChanClient(fast_config())
    yield c
    await c.aclose()
