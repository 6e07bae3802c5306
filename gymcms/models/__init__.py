"""ORM models. Importing this package registers every table on Base.metadata."""

from gymcms.models.content import BlogPost, Page
from gymcms.models.fitness import GymClass, MembershipPlan, Testimonial, Trainer
from gymcms.models.gallery import GalleryAlbum, GalleryImage, Media
from gymcms.models.inbox import ContactSubmission, MembershipInquiry
from gymcms.models.site import ActivityLog, Bulletin, Setting
from gymcms.models.user import User

__all__ = [
    "ActivityLog",
    "BlogPost",
    "Bulletin",
    "ContactSubmission",
    "GalleryAlbum",
    "GalleryImage",
    "GymClass",
    "Media",
    "MembershipInquiry",
    "MembershipPlan",
    "Page",
    "Setting",
    "Testimonial",
    "Trainer",
    "User",
]
