"""SOAP envelope construction and lenient result parsing.

Requests are assembled from escaped element fragments. Responses are read
by locating the result element by tag name (case-insensitive) and collecting
every ``<Tag>value</Tag>`` leaf inside it into a flat dict. Namespaces are
ignored and nested or repeated structures are not reconstructed.
"""

import re

from turkpay.shared.domain.exceptions import SoapResponseError

SOAP_ENVELOPE_NS = "http://schemas.xmlsoap.org/soap/envelope/"

_XML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&apos;"),
)

_LEAF_RE = re.compile(r"<(\w+)>([^<]*)</\1>")
_ENTITY_RE = re.compile(r"&(#x[0-9a-fA-F]+|#[0-9]+|amp|lt|gt|quot|apos);")
_NAMED_ENTITIES = {"amp": "&", "lt": "<", "gt": ">", "quot": '"', "apos": "'"}


def escape_xml(text: object) -> str:
    """Escape & < > " ' for safe insertion into element content."""
    value = "" if text is None else str(text)
    for char, entity in _XML_ESCAPES:
        value = value.replace(char, entity)
    return value


def _replace_entity(match: re.Match[str]) -> str:
    name = match.group(1)
    if name.startswith("#x"):
        return chr(int(name[2:], 16))
    if name.startswith("#"):
        return chr(int(name[1:]))
    return _NAMED_ENTITIES[name]


def unescape_xml(text: str) -> str:
    """Inverse of escape_xml; also resolves numeric character references."""
    return _ENTITY_RE.sub(_replace_entity, text)


def element(tag: str, value: object) -> str:
    """A single ``<tag>value</tag>`` fragment with the value escaped."""
    return f"<{tag}>{escape_xml(value)}</{tag}>"


def build_soap_envelope(action: str, body: str, namespace: str) -> str:
    """Wrap an operation body in a SOAP 1.1 envelope."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        '<soap:Envelope xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
        'xmlns:xsd="http://www.w3.org/2001/XMLSchema" '
        f'xmlns:soap="{SOAP_ENVELOPE_NS}">'
        "<soap:Body>"
        f'<{action} xmlns="{namespace}">{body}</{action}>'
        "</soap:Body>"
        "</soap:Envelope>"
    )


def build_soap_action(namespace: str, action: str) -> str:
    """SOAPAction header value, e.g. https://turkpos.com.tr/TP_Islem_Odeme."""
    return f"{namespace.rstrip('/')}/{action}"


def build_security_block(
    client_code: str, client_username: str, client_password: str, guid: str
) -> str:
    return (
        "<G>"
        + element("CLIENT_CODE", client_code)
        + element("CLIENT_USERNAME", client_username)
        + element("CLIENT_PASSWORD", client_password)
        + element("GUID", guid)
        + "</G>"
    )


def build_card_block(
    holder_name: str,
    number: str,
    expire_month: str,
    expire_year: str,
    cvc: str,
    save_card: bool = False,
) -> str:
    return (
        "<KK_Bilgi>"
        + element("KK_Sahibi", holder_name)
        + element("KK_No", number)
        + element("KK_SK_Ay", expire_month)
        + element("KK_SK_Yil", expire_year)
        + element("KK_CVC", cvc)
        + element("KK_Saklama_Durumu", "1" if save_card else "0")
        + "</KK_Bilgi>"
    )


def build_body(*fragments: str, **fields: object) -> str:
    """Concatenate pre-built blocks followed by scalar fields in order."""
    return "".join(fragments) + "".join(
        element(tag, value) for tag, value in fields.items()
    )


def find_result_block(xml: str, tag_name: str) -> str | None:
    pattern = re.compile(
        rf"<{re.escape(tag_name)}(?:\s[^>]*)?>(.*?)</{re.escape(tag_name)}>",
        re.IGNORECASE | re.DOTALL,
    )
    match = pattern.search(xml)
    return match.group(1) if match else None


def parse_soap_result(xml: str, tag_name: str, provider: str = "soap") -> dict[str, str]:
    """
    Extract the leaf elements of ``tag_name`` into a flat dict.

    Raises SoapResponseError when the result element is absent, carrying the
    SOAP fault string when the response is a fault.
    """
    block = find_result_block(xml, tag_name)
    if block is None:
        raise SoapResponseError(provider, tag_name, parse_soap_fault(xml))

    return {tag: unescape_xml(value) for tag, value in _LEAF_RE.findall(block)}


def parse_soap_fault(xml: str) -> str | None:
    """Return the faultstring of a SOAP fault, if the document is one."""
    fault = find_result_block(xml, "faultstring")
    if fault is None:
        return None
    return unescape_xml(fault.strip())
