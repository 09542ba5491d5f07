"""
Fallback data shown when a Supabase read fails (or comes back empty where
the page would otherwise be blank).

Everything here is static except the timestamps, which are spread over the
last month relative to "now" so the feed always looks recent.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional


FALLBACK_USERS: List[Dict] = [
    {
        "id": "user1", "username": "techguru", "name": "Tech Guru",
        "avatar_url": "general/user1.png", "cover_url": "general/cover1.jpg",
        "bio": "Software engineer and tech enthusiast. Building the future one line of code at a time.",
        "location": "San Francisco, CA", "website": "https://techguru.dev",
        "followers_count": 15432, "following_count": 1254, "created_at": "2020-03-15T00:00:00+00:00",
    },
    {
        "id": "user2", "username": "designmaster", "name": "Design Master",
        "avatar_url": "general/user2.png", "cover_url": "general/cover2.jpg",
        "bio": "UI/UX Designer. Creating beautiful, functional, and accessible designs.",
        "location": "New York, NY", "website": "https://designmaster.io",
        "followers_count": 8976, "following_count": 867, "created_at": "2019-07-22T00:00:00+00:00",
    },
    {
        "id": "user3", "username": "airesearcher", "name": "AI Researcher",
        "avatar_url": "general/user3.png", "cover_url": "general/cover3.jpg",
        "bio": "Studying artificial intelligence and machine learning. PhD in Computer Science.",
        "location": "Boston, MA", "website": "https://ai-research.org",
        "followers_count": 12345, "following_count": 543, "created_at": "2018-11-05T00:00:00+00:00",
    },
    {
        "id": "user4", "username": "newsreporter", "name": "News Reporter",
        "avatar_url": "general/user4.png", "cover_url": "general/cover4.jpg",
        "bio": "Breaking news and technology trends. Journalist for TechDaily.",
        "location": "Washington, DC", "website": "https://techdaily.com",
        "followers_count": 25678, "following_count": 1876, "created_at": "2017-05-12T00:00:00+00:00",
    },
    {
        "id": "user5", "username": "startupfounder", "name": "Startup Founder",
        "avatar_url": "general/user5.png", "cover_url": "general/cover5.jpg",
        "bio": "CEO and Founder of TechStartup. Building the next unicorn.",
        "location": "Austin, TX", "website": "https://techstartup.io",
        "followers_count": 9876, "following_count": 765, "created_at": "2019-02-28T00:00:00+00:00",
    },
    {
        "id": "user6", "username": "dataanalyst", "name": "Data Analyst",
        "avatar_url": "general/user6.png", "cover_url": "general/cover6.jpg",
        "bio": "Finding insights in data. Passionate about statistics and visualization.",
        "location": "Chicago, IL", "website": "https://datainsights.co",
        "followers_count": 7654, "following_count": 876, "created_at": "2020-01-15T00:00:00+00:00",
    },
    {
        "id": "user7", "username": "webdeveloper", "name": "Web Developer",
        "avatar_url": "general/user7.png", "cover_url": "general/cover7.jpg",
        "bio": "Full-stack developer specializing in APIs and the web platform.",
        "location": "Seattle, WA", "website": "https://webdev.codes",
        "followers_count": 5432, "following_count": 654, "created_at": "2021-04-10T00:00:00+00:00",
    },
    {
        "id": "user8", "username": "cryptoenthusiast", "name": "Crypto Enthusiast",
        "avatar_url": "general/user8.png", "cover_url": "general/cover8.jpg",
        "bio": "Blockchain technology advocate. Investing in the future of finance.",
        "location": "Miami, FL", "website": "https://crypto-future.net",
        "followers_count": 11234, "following_count": 987, "created_at": "2018-09-20T00:00:00+00:00",
    },
    {
        "id": "user9", "username": "productmanager", "name": "Product Manager",
        "avatar_url": "general/user9.png", "cover_url": "general/cover9.jpg",
        "bio": "Building products that solve real problems. User-centric and data-driven.",
        "location": "Portland, OR", "website": "https://productbuilder.io",
        "followers_count": 8765, "following_count": 876, "created_at": "2019-11-11T00:00:00+00:00",
    },
    {
        "id": "user10", "username": "gamingpro", "name": "Gaming Pro",
        "avatar_url": "general/user10.png", "cover_url": "general/cover10.jpg",
        "bio": "Professional gamer and streamer. Join me on stream!",
        "location": "Los Angeles, CA", "website": "https://twitch.tv/gamingpro",
        "followers_count": 32145, "following_count": 1243, "created_at": "2017-12-05T00:00:00+00:00",
    },
]

FALLBACK_TRENDING_TOPICS: List[Dict] = [
    {"id": "1", "tag": "#Programming", "posts_count": 12500, "category": "Technology",
     "image_url": "general/trending1.jpg"},
    {"id": "2", "tag": "#AI", "posts_count": 8740, "category": "Technology"},
    {"id": "3", "tag": "#WebDev", "posts_count": 5230, "category": "Technology"},
    {"id": "4", "tag": "#Blockchain", "posts_count": 3890, "category": "Cryptocurrency"},
    {"id": "5", "tag": "#WorkFromHome", "posts_count": 2150, "category": "Lifestyle"},
    {"id": "6", "tag": "#NextJS", "posts_count": 1850, "category": "Technology"},
    {"id": "7", "tag": "#Gaming", "posts_count": 4320, "category": "Entertainment"},
    {"id": "8", "tag": "#UX", "posts_count": 1750, "category": "Design"},
    {"id": "9", "tag": "#StartupLife", "posts_count": 2250, "category": "Business"},
    {"id": "10", "tag": "#Innovation", "posts_count": 3100, "category": "Business"},
]

FALLBACK_COMMUNITIES: List[Dict] = [
    {
        "id": "community1", "name": "JavaScript Developers",
        "description": "A community for JavaScript developers to share knowledge, ask questions, and collaborate on projects.",
        "member_count": 12580, "avatar_url": "general/community1.jpg", "is_private": False,
    },
    {
        "id": "community2", "name": "UI/UX Designers",
        "description": "Share your designs, get feedback, and discuss the latest trends in UI/UX design.",
        "member_count": 8750, "avatar_url": "general/community2.jpg", "is_private": False,
    },
    {
        "id": "community3", "name": "AI Researchers",
        "description": "Discuss artificial intelligence research, share papers, and collaborate on AI projects.",
        "member_count": 5430, "avatar_url": "general/community3.jpg", "is_private": False,
    },
    {
        "id": "community4", "name": "Startup Founders",
        "description": "Connect with other startup founders, share your experiences, and get advice.",
        "member_count": 6780, "avatar_url": "general/community4.jpg", "is_private": False,
    },
    {
        "id": "community5", "name": "Blockchain Developers",
        "description": "A community for blockchain developers to discuss technology, projects, and opportunities.",
        "member_count": 4320, "avatar_url": "general/community5.jpg", "is_private": False,
    },
]

POPULAR_HASHTAGS = [
    "#Programming", "#Python", "#FastAPI", "#NextJS", "#WebDev",
    "#AI", "#MachineLearning", "#DataScience", "#Blockchain", "#Crypto",
    "#TechNews", "#ProductDevelopment", "#UX", "#Design", "#StartupLife",
    "#Gaming", "#WorkFromHome", "#Technology", "#Innovation", "#SoftwareEngineering",
]

POST_TEMPLATES = [
    "Just published my latest article on {tags}. Check it out and let me know what you think!",
    "Excited to share my latest project using {tags}. It's been an amazing journey!",
    "Attending a conference on {tags} next week. Anyone else going?",
    "My thoughts on the future of {tags} - I believe we're just scratching the surface.",
    "Looking for recommendations on learning {tags}. What resources did you find helpful?",
    "Just solved a challenging problem with {tags}. So satisfying when the code finally works!",
    "Great discussion today about {tags} with some brilliant minds in the industry.",
    "New tutorial on {tags} is now available. Link in bio!",
    "What's your favorite tool for {tags}? I'm currently using XYZ and loving it.",
    "Hot take: {tags} is changing faster than most can keep up with. Focus on fundamentals!",
]

POSTS_PER_USER = 10


def _now() -> datetime:
    return datetime.now(timezone.utc)


def user_summary(user: Dict) -> Dict:
    return {key: user[key] for key in ("id", "username", "name", "avatar_url")}


def generate_posts(now: Optional[datetime] = None) -> List[Dict]:
    """Ten posts per fallback user, newest first."""
    now = now or _now()
    posts = []
    for u_index, user in enumerate(FALLBACK_USERS):
        for i in range(1, POSTS_PER_USER + 1):
            seed = u_index * POSTS_PER_USER + i
            tag_count = seed % 3 + 1
            hashtags = [POPULAR_HASHTAGS[(seed * 7 + k * 3) % len(POPULAR_HASHTAGS)] for k in range(tag_count)]
            has_media = seed % 4 == 0
            posts.append({
                "id": f"post_{user['id']}_{i}",
                "user_id": user["id"],
                "content": POST_TEMPLATES[seed % len(POST_TEMPLATES)].format(tags=" ".join(hashtags)),
                # spread over the last 30 days, staggered per user
                "created_at": (now - timedelta(minutes=(seed * 433) % (30 * 24 * 60))).isoformat(),
                "media_urls": ["general/post_image.jpg"] if has_media else None,
                "media_types": ["image"] if has_media else None,
                "likes_count": (seed * 37) % 1000,
                "comments_count": (seed * 13) % 100,
                "reposts_count": (seed * 7) % 50,
                "hashtags": hashtags,
                "users": user_summary(user),
            })
    posts.sort(key=lambda p: p["created_at"], reverse=True)
    return posts


def filter_posts_by_hashtag(posts: List[Dict], hashtag: str) -> List[Dict]:
    """Posts tagged with (or mentioning) the hashtag, '#' optional."""
    search_tag = (hashtag if hashtag.startswith("#") else f"#{hashtag}").lower()
    return [
        post for post in posts
        if any(tag.lower() == search_tag for tag in post.get("hashtags") or [])
        or search_tag in (post.get("content") or "").lower()
    ]


def filter_posts_by_user(posts: List[Dict], user_id: str) -> List[Dict]:
    return [post for post in posts if post["user_id"] == user_id]


def feed_posts_for(posts: List[Dict], following_ids: List[str]) -> List[Dict]:
    """Posts from the followed users only."""
    following = set(following_ids)
    return [post for post in posts if post["user_id"] in following]


def fallback_notifications(user_id: str, now: Optional[datetime] = None) -> List[Dict]:
    now = now or _now()
    samples = [
        ("like", FALLBACK_USERS[0], {"content": "Just published my latest article on #Python."}, 5),
        ("follow", FALLBACK_USERS[1], None, 45),
        ("comment", FALLBACK_USERS[2], {"content": "Great discussion today about #AI."}, 180),
        ("repost", FALLBACK_USERS[3], {"content": "New tutorial on #WebDev is now available."}, 60 * 24),
        ("mention", FALLBACK_USERS[4], {"content": "Hot take: fundamentals still matter."}, 60 * 48),
    ]
    notifications = []
    for index, (kind, actor, post, minutes_ago) in enumerate(samples, start=1):
        notifications.append({
            "id": f"notification{index}",
            "user_id": user_id,
            "actor_id": actor["id"],
            "type": kind,
            "post_id": f"post_{actor['id']}_1" if post else None,
            "seen": index > 2,
            "created_at": (now - timedelta(minutes=minutes_ago)).isoformat(),
            "actor": user_summary(actor),
            "post": post,
        })
    return notifications


FALLBACK_CONTACTS = [
    {"id": "contact1", "username": "johndoe", "name": "John Doe", "avatar_url": "general/avatar.png"},
    {"id": "contact2", "username": "janesmith", "name": "Jane Smith", "avatar_url": "general/avatar.png"},
    {"id": "contact3", "username": "techteam", "name": "Tech Support", "avatar_url": "general/avatar.png"},
]


def fallback_conversations(user_id: str, now: Optional[datetime] = None) -> List[Dict]:
    now = now or _now()
    john, jane, support = FALLBACK_CONTACTS
    return [
        {
            "user": john,
            "last_message": {
                "id": "msg1", "sender_id": john["id"], "receiver_id": user_id,
                "content": "Hey! Did you see the latest features on the app?",
                "created_at": (now - timedelta(minutes=20)).isoformat(), "is_read": False,
            },
            "unread_count": 3,
        },
        {
            "user": jane,
            "last_message": {
                "id": "msg2", "sender_id": user_id, "receiver_id": jane["id"],
                "content": "Thanks for helping me with that project!",
                "created_at": (now - timedelta(hours=2)).isoformat(), "is_read": True,
            },
            "unread_count": 0,
        },
        {
            "user": support,
            "last_message": {
                "id": "msg3", "sender_id": support["id"], "receiver_id": user_id,
                "content": "Your request has been processed. Please let us know if you need anything else.",
                "created_at": (now - timedelta(days=1)).isoformat(), "is_read": True,
            },
            "unread_count": 0,
        },
    ]


def fallback_thread(user_id: str, other_id: str, now: Optional[datetime] = None) -> List[Dict]:
    """A short back-and-forth, oldest first."""
    now = now or _now()
    lines = [
        (other_id, "Hey there! How's it going?", 60),
        (user_id, "Pretty good, thanks! Just working on some new features.", 55),
        (other_id, "That sounds interesting! What kind of features?", 50),
        (user_id, "Realtime notifications and a better compose flow.", 45),
    ]
    thread = []
    for index, (sender, content, minutes_ago) in enumerate(lines, start=1):
        thread.append({
            "id": f"thread_msg{index}",
            "sender_id": sender,
            "receiver_id": user_id if sender == other_id else other_id,
            "content": content,
            "created_at": (now - timedelta(minutes=minutes_ago)).isoformat(),
            "is_read": True,
        })
    return thread


def fallback_bookmarks(user_id: str, now: Optional[datetime] = None) -> List[Dict]:
    now = now or _now()
    posts = generate_posts(now)[:3]
    return [
        {
            "id": f"bookmark{index}",
            "user_id": user_id,
            "post_id": post["id"],
            "collection_id": "collection1" if index == 1 else None,
            "created_at": (now - timedelta(days=index)).isoformat(),
            "posts": post,
        }
        for index, post in enumerate(posts, start=1)
    ]


def fallback_collections(user_id: str, now: Optional[datetime] = None) -> List[Dict]:
    now = now or _now()
    return [
        {"id": "collection1", "user_id": user_id, "name": "Reading list", "post_count": 1,
         "created_at": (now - timedelta(days=10)).isoformat()},
        {"id": "collection2", "user_id": user_id, "name": "Inspiration", "post_count": 0,
         "created_at": (now - timedelta(days=5)).isoformat()},
    ]
