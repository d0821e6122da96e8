"""Document builders for users and blogs as they are stored in MongoDB."""

from datetime import datetime, timedelta, timezone

from bson import ObjectId

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_user(username: str = "ada", email: str = None, google_auth: bool = False, **overrides):
    user = {
        "_id": ObjectId(),
        "personal_info": {
            "fullname": username.title(),
            "email": email or f"{username}@example.com",
            "username": username,
            "bio": "",
            "profile_img": f"https://img.example.com/{username}.svg",
        },
        "social_links": {},
        "account_info": {"total_posts": 0, "total_reads": 0},
        "google_auth": google_auth,
        "blogs": [],
        "joinedAt": BASE_TIME,
        "updatedAt": BASE_TIME,
    }
    if not google_auth:
        user["personal_info"]["password"] = "$2b$10$notarealhash"
    user.update(overrides)
    return user


def make_blog(author_id: ObjectId, blog_id: str, minutes: int = 0, reads: int = 0, likes: int = 0,
              draft: bool = False, tags=("python",), title: str = None):
    return {
        "_id": ObjectId(),
        "blog_id": blog_id,
        "title": title or blog_id.replace("-", " ").title(),
        "banner": "https://img.example.com/banner.jpeg",
        "desc": "A short description",
        "content": [{"blocks": [{"type": "paragraph", "data": {"text": "Hello"}}]}],
        "tags": list(tags),
        "author": author_id,
        "activity": {"total_likes": likes, "total_comments": 0, "total_reads": reads, "total_parent_comments": 0},
        "comments": [],
        "draft": draft,
        "publishedAt": BASE_TIME + timedelta(minutes=minutes),
        "updatedAt": BASE_TIME + timedelta(minutes=minutes),
    }


