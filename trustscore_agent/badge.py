from __future__ import annotations

import math
from xml.sax.saxutils import escape

from .scoring import badge_color

RING_RADIUS = 18
CIRCUMFERENCE = 2 * math.pi * RING_RADIUS


def ring_offset(score: int) -> float:
    return CIRCUMFERENCE * (1 - score / 100)


def render_badge(domain: str, score: int) -> str:
    color = badge_color(score)
    offset = ring_offset(score)
    return f"""<svg xmlns="http://www.w3.org/2000/svg" width="200" height="60" viewBox="0 0 200 60">
  <defs>
    <linearGradient id="bg" x1="0%" y1="0%" x2="100%" y2="100%">
      <stop offset="0%" style="stop-color:#1a1a1a"/>
      <stop offset="100%" style="stop-color:#0a0a0a"/>
    </linearGradient>
  </defs>
  <rect width="200" height="60" rx="12" fill="url(#bg)" stroke="#333" stroke-width="1"/>
  <circle cx="35" cy="30" r="22" fill="none" stroke="#333" stroke-width="3"/>
  <circle cx="35" cy="30" r="{RING_RADIUS}" fill="none" stroke="{color}" stroke-width="4"
    stroke-dasharray="{CIRCUMFERENCE}" stroke-dashoffset="{offset}"
    stroke-linecap="round" transform="rotate(-90 35 30)"/>
  <text x="35" y="35" fill="white" font-size="14" font-weight="bold" text-anchor="middle" font-family="system-ui">{score}</text>
  <text x="72" y="25" fill="#888" font-size="10" font-family="system-ui">{escape(domain)}</text>
  <text x="72" y="42" fill="white" font-size="13" font-weight="600" font-family="system-ui">Verified Trust Score</text>
</svg>"""
