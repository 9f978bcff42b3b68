"""
Bundled content and the loader that seeds it into the virtual filesystem.

Posts are markdown files shipped under ``content/blog``. They are copied
into ``/blog`` at session start unless a file of the same name is already
there, so edits a visitor made in an earlier session survive.
"""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..filesystem import FileSystemStore, BLOG_DIR

logger = logging.getLogger(__name__)

CONTENT_DIR = os.path.dirname(os.path.abspath(__file__))
POSTS_DIR = os.path.join(CONTENT_DIR, 'blog')
PROFILE_FILE = os.path.join(CONTENT_DIR, 'profile.md')


@dataclass
class BlogPost:
    """A markdown post to be placed under /blog."""
    name: str
    content: str


def _read_text(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def bundled_posts() -> List[BlogPost]:
    """All markdown posts shipped with the package, ordered by file name."""
    names = sorted(name for name in os.listdir(POSTS_DIR) if name.endswith('.md'))
    return [BlogPost(name, _read_text(os.path.join(POSTS_DIR, name))) for name in names]


def load_profile() -> str:
    """The markdown shown by the whoami modal."""
    return _read_text(PROFILE_FILE)


def load_blog_posts(fs: FileSystemStore,
                    posts: Optional[Iterable[BlogPost]] = None) -> int:
    """
    Create any missing posts under /blog.

    Args:
        fs: Store to seed
        posts: Posts to load (default: the bundled posts)

    Returns:
        Number of posts created. Zero if /blog is missing or is a file.
    """
    blog_dir = fs.get_node_at_path(f'/{BLOG_DIR}')
    if blog_dir is None or not blog_dir.is_dir():
        return 0

    if posts is None:
        posts = bundled_posts()

    created = 0
    for post in posts:
        path = f'/{BLOG_DIR}/{post.name}'
        if fs.get_node_at_path(path) is None and fs.create_file(path, post.content):
            created += 1

    if created:
        logger.info("Seeded %d blog post(s) into /%s", created, BLOG_DIR)
    return created
