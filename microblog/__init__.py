"""
Microblog - a social microblogging web application.

Architecture:
- Supabase: tables, auth, storage and realtime (the source of truth)
- Cloudinary: media upload and on-the-fly image/video transformation
- FastAPI: JSON API, websocket relays and server-rendered pages
"""

__version__ = "1.0.0"
