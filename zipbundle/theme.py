from reportlab.lib.colors import HexColor

COLORS = {
    "accent": HexColor("#2f6fb3"),
    "green": HexColor("#2e8b57"),
    "red": HexColor("#c0392b"),
    "muted": HexColor("#888888"),
    "header_bg": HexColor("#2b3440"),
    "border": HexColor("#d0d7de"),
    "row_alt": HexColor("#f8f9fa"),
}
