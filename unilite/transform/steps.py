"""
Tree passes of the HTML transform pipeline.

Every step takes the current working subtree and the transform context,
mutates the tree in place and returns the subtree later steps work on. Only
``extract_content_region`` returns a different node.
"""

from dataclasses import dataclass
from typing import Callable, Iterable

from bs4 import BeautifulSoup, Comment, Doctype, Tag

from unilite.vars import PROXY_PATH
from .urls import (
    build_proxy_url,
    is_fragment,
    is_proxy_endpoint,
    is_script_url,
    resolve_url,
)

STRIPPED_TAGS = (
    "script",
    "style",
    "video",
    "audio",
    "iframe",
    "link",
    "noscript",
    "svg",
    "object",
    "embed",
    "canvas",
)
CHROME_TAGS = frozenset({"header", "footer", "nav", "aside"})
# Conventional class/id names of page chrome
CHROME_NAMES = frozenset(
    {
        "header",
        "footer",
        "nav",
        "navbar",
        "navigation",
        "sidebar",
        "ads",
        "ad",
        "advert",
        "popup",
        "modal",
        "share-buttons",
        "social",
    }
)

CAPTCHA_MARKER = "captcha"
CAPTCHA_ALT = "CAPTCHA Image"
CAPTCHA_CLASS = "captcha-img"
CAPTCHA_PLACEHOLDER_STYLE = "min-height: 50px; min-width: 150px; background: #eee;"

CONTENT_SELECTORS = (
    "main",
    "#main-content",
    "#content",
    ".content",
    ".container",
    "body",
)

ALLOWED_ATTRIBUTES = frozenset(
    {
        "href",
        "src",
        "action",
        "method",
        "name",
        "id",
        "value",
        "type",
        "alt",
        "style",
        "class",
    }
)

CONTROL_FIELDS = ("url", "sessionId")


@dataclass(frozen=True)
class TransformContext:
    document: BeautifulSoup
    session_id: str
    base_url: str


TransformStep = Callable[[Tag, TransformContext], Tag]


def _remove(elements: Iterable[Tag]) -> None:
    for element in elements:
        # Children of an already removed region come back from find_all() too
        if not element.decomposed:
            element.decompose()


def _is_chrome(tag: Tag) -> bool:
    if tag.name in CHROME_TAGS:
        return True
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    if CHROME_NAMES.intersection(c.lower() for c in classes):
        return True
    return (tag.get("id") or "").lower() in CHROME_NAMES


def strip_structural(root: Tag, ctx: TransformContext) -> Tag:
    _remove(root.find_all(list(STRIPPED_TAGS)))
    for comment in root.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
    _remove(root.find_all(_is_chrome))
    return root


def is_captcha_image(img: Tag) -> bool:
    src = (img.get("src") or "").lower()
    element_id = (img.get("id") or "").lower()
    return CAPTCHA_MARKER in src or CAPTCHA_MARKER in element_id


def filter_images(root: Tag, ctx: TransformContext) -> Tag:
    for img in root.find_all("img"):
        if is_captcha_image(img):
            img["alt"] = CAPTCHA_ALT
        else:
            img.decompose()
    return root


def _strip_document_frame(root: Tag) -> Tag:
    # html.parser only builds a <body> when the markup has one
    for node in list(root.contents):
        if isinstance(node, Doctype):
            node.extract()
    _remove(root.find_all("head"))
    for html in root.find_all("html"):
        html.unwrap()
    return root


def extract_content_region(root: Tag, ctx: TransformContext) -> Tag:
    for selector in CONTENT_SELECTORS:
        region = root.select_one(selector)
        if region is not None:
            return region
    return _strip_document_frame(root)


def whitelist_attributes(root: Tag, ctx: TransformContext) -> Tag:
    for tag in root.find_all(True):
        tag.attrs = {
            name: value
            for name, value in tag.attrs.items()
            if name in ALLOWED_ATTRIBUTES
        }
    return root


def rewrite_links(root: Tag, ctx: TransformContext) -> Tag:
    for anchor in root.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href or is_script_url(href) or is_fragment(href):
            continue
        anchor["href"] = build_proxy_url(resolve_url(href, ctx.base_url), ctx.session_id)
    return root


def rewrite_images(root: Tag, ctx: TransformContext) -> Tag:
    for img in root.find_all("img"):
        src = (img.get("src") or "").strip()
        if src:
            img["src"] = build_proxy_url(resolve_url(src, ctx.base_url), ctx.session_id)
        img["class"] = CAPTCHA_CLASS
        img["style"] = CAPTCHA_PLACEHOLDER_STYLE
    return root


def _hidden_input(ctx: TransformContext, name: str, value: str) -> Tag:
    return ctx.document.new_tag(
        "input", attrs={"type": "hidden", "name": name, "value": value}
    )


def rewrite_forms(root: Tag, ctx: TransformContext) -> Tag:
    for form in root.find_all("form"):
        action = (form.get("action") or "").strip()
        stale = [
            field
            for field in form.find_all("input", attrs={"type": "hidden"})
            if field.get("name") in CONTROL_FIELDS
        ]
        if is_proxy_endpoint(action):
            previous = next(
                (f.get("value") for f in stale if f.get("name") == "url"), None
            )
            action = previous or action
        _remove(stale)

        target = resolve_url(action or "/", ctx.base_url)
        form["action"] = PROXY_PATH
        form["method"] = "POST"
        form.insert(0, _hidden_input(ctx, "url", target))
        form.insert(1, _hidden_input(ctx, "sessionId", ctx.session_id or ""))
    return root


DEFAULT_STEPS: tuple[TransformStep, ...] = (
    strip_structural,
    filter_images,
    extract_content_region,
    whitelist_attributes,
    rewrite_links,
    rewrite_images,
    rewrite_forms,
)
