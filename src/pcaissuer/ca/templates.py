"""Certificate template selection from requested key usages."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pcaissuer.core.types import KeyUsage, TemplateArn

if TYPE_CHECKING:
    from collections.abc import Sequence

_SINGLE_USAGE_TEMPLATES: dict[KeyUsage, TemplateArn] = {
    KeyUsage.CODE_SIGNING: TemplateArn.CODE_SIGNING,
    KeyUsage.CLIENT_AUTH: TemplateArn.CLIENT_AUTH,
    KeyUsage.SERVER_AUTH: TemplateArn.SERVER_AUTH,
    KeyUsage.OCSP_SIGNING: TemplateArn.OCSP_SIGNING,
}

_DUAL_AUTH = frozenset({KeyUsage.CLIENT_AUTH, KeyUsage.SERVER_AUTH})


def template_arn(usages: Sequence[KeyUsage | str]) -> TemplateArn:
    """Return the issuance template for *usages*.

    Falls back to the CSR passthrough template, which issues whatever
    extensions the CSR carries, when no specific template matches.
    """
    if len(usages) == 1:
        template = _SINGLE_USAGE_TEMPLATES.get(usages[0])
        if template is not None:
            return template
    elif len(usages) == 2 and set(usages) == _DUAL_AUTH:  # noqa: PLR2004
        return TemplateArn.END_ENTITY

    return TemplateArn.BLANK_PASSTHROUGH
