from datetime import datetime, timezone

from galleryhq.database import SessionLocal, engine, Base
from galleryhq.auth import get_password_hash
from galleryhq.models import Activity, Message, User
from galleryhq.models.message import STATUS_APPROVED, STATUS_PENDING_REVIEW
from galleryhq.models.user import ROLE_ADMIN

# Create tables
Base.metadata.create_all(bind=engine)

db = SessionLocal()

# Clear existing data
db.query(Activity).delete()
db.query(Message).delete()
db.query(User).delete()

password = get_password_hash("changeme123")

admin = User(email="admin@example.com", username="admin", hashed_password=password,
             display_name="Gallery Admin", role=ROLE_ADMIN)
artist = User(email="artist@example.com", username="mira", hashed_password=password,
              display_name="Mira Okafor")
collector = User(email="collector@example.com", username="jonas", hashed_password=password,
                 display_name="Jonas Held")
db.add_all([admin, artist, collector])
db.commit()

# Sample messages
messages = [
    Message(
        sender_id=collector.id,
        recipient_id=artist.id,
        context_type="artwork",
        subject="Blue Hour print",
        body="Is the Blue Hour series still available as a signed print?",
        moderation_status=STATUS_PENDING_REVIEW,
        tone_score=0.12,
    ),
    Message(
        sender_id=collector.id,
        recipient_id=artist.id,
        subject="Studio visit",
        body="Would you be open to a studio visit next month?",
        moderation_status=STATUS_PENDING_REVIEW,
        tone_score=0.67,
        flagged_reason="Possible off-platform contact request",
    ),
    Message(
        sender_id=artist.id,
        recipient_id=collector.id,
        context_type="general",
        subject="Thanks",
        body="Thank you for adding my work to your collection!",
        moderation_status=STATUS_APPROVED,
        reviewed_by=admin.id,
        reviewed_at=datetime.now(timezone.utc),
    ),
]

db.add_all(messages)
db.commit()
db.close()

print("Seed data created successfully!")
