"""Assemble the spoken description of a node from its description tokens."""

from __future__ import annotations

from typing import Iterable, Literal, Mapping, Optional, Union

from .errors import SettingsError
from .formatting import capitalize_first
from .hierarchy import HIERARCHY_LEVEL_TO_TOKENS, TokenType, hierarchy_level
from .settings import DEFAULT_PRESET, Preset, Settings, TokenLength
from .tree import AccessibilityTreeNode

LengthName = Literal["off", "short", "long"]
Policy = Mapping[TokenType, Union[LengthName, TokenLength]]

_ORDINALS: dict[str, Optional[TokenLength]] = {
    "off": None,
    "short": TokenLength.SHORT,
    "long": TokenLength.LONG,
}


def _ordinal(length: Union[LengthName, TokenLength]) -> Optional[TokenLength]:
    if isinstance(length, str):
        try:
            return _ORDINALS[length]
        except KeyError as exc:
            raise SettingsError(f"Unknown token length {length!r}") from exc
    return TokenLength(length)


def policy_from_preset(preset: Preset) -> dict[TokenType, LengthName]:
    """Convert an ordered preset into an ordered ``token -> length`` policy."""

    return {token: TokenLength(length).name.lower() for token, length in preset}  # type: ignore[misc]


def format_description(fragments: Iterable[str]) -> str:
    """Drop empty fragments, capitalize the rest and join them as sentences."""

    kept = [capitalize_first(fragment) for fragment in fragments if len(fragment) > 0]
    return ". ".join(kept) + "."


def resolve_description(
    description: Mapping[TokenType, tuple[str, str]],
    policy: Policy,
    focus_tokens: Iterable[TokenType] = (),
) -> str:
    """Build the final description string of a node.

    Parameters
    ----------
    description:
        The node's ``token -> (short, long)`` map.
    policy:
        Ordered ``token -> 'off' | 'short' | 'long'`` mapping; iteration order
        is the narration order.
    focus_tokens:
        Tokens read first regardless of the policy. A focused token the policy
        switches off is read in its short form.
    """

    focused = [token for token in dict.fromkeys(focus_tokens) if token in description]
    fragments: list[str] = []
    for token in focused:
        length = _ordinal(policy.get(token, "off"))
        fragments.append(description[token][length if length is not None else TokenLength.SHORT])
    for token, length in policy.items():
        ordinal = _ordinal(length)
        if ordinal is None or token in focused or token not in description:
            continue
        fragments.append(description[token][ordinal])
    return format_description(fragments)


def node_policy(
    node: AccessibilityTreeNode,
    settings: Settings,
    selections: Optional[Mapping[str, str]] = None,
) -> dict[TokenType, LengthName]:
    """Return the policy that applies to ``node``.

    The root level is not configurable and always reads every token in its long
    form. Other levels use the preset selected for them in ``selections``,
    ``"high"`` when none is selected.
    """

    level = hierarchy_level(node.type)
    if level == "root":
        return {token: "long" for token in HIERARCHY_LEVEL_TO_TOKENS[level]}
    preset_name = (selections or {}).get(level, DEFAULT_PRESET)
    try:
        preset = settings[level][preset_name]
    except KeyError as exc:
        raise SettingsError(f"No preset {preset_name!r} for level {level!r}") from exc
    return policy_from_preset(preset)


def describe_node(
    node: AccessibilityTreeNode,
    settings: Settings,
    selections: Optional[Mapping[str, str]] = None,
    focus_tokens: Iterable[TokenType] = (),
) -> str:
    """Resolve the description of ``node`` under the selected presets."""

    policy = node_policy(node, settings, selections)
    return resolve_description(node.description, policy, focus_tokens)


def describe_token(
    node: AccessibilityTreeNode,
    token: TokenType,
    settings: Settings,
    selections: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Return a single token of ``node`` at the length its preset configures.

    ``None`` when the node has no such token; the short form when the preset
    switches the token off.
    """

    if token not in node.description:
        return None
    policy = node_policy(node, settings, selections)
    length = _ordinal(policy.get(token, "short"))
    return node.description[token][length if length is not None else TokenLength.SHORT]


__all__ = [
    "LengthName",
    "Policy",
    "describe_node",
    "describe_token",
    "format_description",
    "node_policy",
    "policy_from_preset",
    "resolve_description",
]
