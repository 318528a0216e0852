#!/usr/bin/env python3
"""
Seed the freelancer directory with demo designers and developers.

Existing users (matched by external id) have their profile overwritten, so the
script can be re-run safely.

Example usage:
    python scripts/seed_freelancers.py
    python scripts/seed_freelancers.py --init-db
"""
import argparse
import logging
import sys
from pathlib import Path

# Ensure we can import from the project root
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from core.enums import ExperienceLevel, FreelancerRole, UserRole
from database.init_db import init_db
from database.uow import UnitOfWork, marketplace_uow

logger = logging.getLogger(__name__)

FREELANCERS = [
    {
        'email': 'ananya.designs@example.com',
        'name': 'Ananya Rao',
        'role': FreelancerRole.DESIGNER,
        'experience_level': ExperienceLevel.SENIOR,
        'skills': ['Figma', 'Adobe XD', 'UI/UX Design', 'Prototyping', 'Wireframing'],
        'hourly_rate': 1500,
        'bio': 'Senior UI/UX designer creating clean interfaces for web and mobile products.',
        'portfolio_url': 'https://behance.net/ananyarao',
        'rating': 4.8,
        'completed_projects': 45,
    },
    {
        'email': 'vikram.codes@example.com',
        'name': 'Vikram Shah',
        'role': FreelancerRole.DEVELOPER,
        'experience_level': ExperienceLevel.SENIOR,
        'skills': ['React', 'Next.js', 'Node.js', 'TypeScript', 'Stripe', 'OAuth'],
        'hourly_rate': 1800,
        'bio': 'Full-stack developer building scalable web applications with React and Node.',
        'portfolio_url': 'https://github.com/vikramshah',
        'rating': 4.9,
        'completed_projects': 52,
    },
    {
        'email': 'meera.brand@example.com',
        'name': 'Meera Iyer',
        'role': FreelancerRole.DESIGNER,
        'experience_level': ExperienceLevel.MID,
        'skills': ['Illustrator', 'Photoshop', 'Branding', 'Logo Design', 'UI Design'],
        'hourly_rate': 1000,
        'bio': 'Brand and visual identity designer.',
        'portfolio_url': 'https://dribbble.com/meeraiyer',
        'rating': 4.5,
        'completed_projects': 28,
    },
    {
        'email': 'kabir.builds@example.com',
        'name': 'Kabir Mehta',
        'role': FreelancerRole.DEVELOPER,
        'experience_level': ExperienceLevel.MID,
        'skills': ['JavaScript', 'React', 'Python', 'Django', 'PostgreSQL', 'Auth'],
        'hourly_rate': 1200,
        'bio': 'Developer who ships MVPs quickly with clean, tested code.',
        'portfolio_url': 'https://github.com/kabirmehta',
        'rating': 4.6,
        'completed_projects': 31,
    },
]


def seed_freelancer(uow: UnitOfWork, entry: dict) -> None:
    external_id = f"seed_{entry['email'].split('@')[0]}"
    user = uow.users.upsert(external_id, UserRole.FREELANCER, email=entry['email'], name=entry['name'])

    fields = {
        'role': entry['role'],
        'experience_level': entry['experience_level'],
        'skills': entry['skills'],
        'tools_used': entry['skills'],
        'hourly_rate': entry['hourly_rate'],
        'bio': entry['bio'],
        'portfolio_url': entry['portfolio_url'],
    }
    freelancer = uow.freelancers.get_by_user_id(user.id)
    if freelancer is None:
        freelancer = uow.freelancers.create(user.id, fields)
        logger.info(f"Created {entry['role'].value} profile for {entry['name']}")
    else:
        uow.freelancers.update_profile(freelancer, fields)
        logger.info(f"Updated {entry['role'].value} profile for {entry['name']}")

    # Seeded track record; the API never lets a freelancer set these
    freelancer.rating = entry['rating']
    freelancer.completed_projects = entry['completed_projects']
    freelancer.is_available = True


def main():
    parser = argparse.ArgumentParser(description='Seed demo freelancers')
    parser.add_argument('--init-db', action='store_true', help='Create tables first')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.init_db:
        init_db()

    with marketplace_uow() as uow:
        for entry in FREELANCERS:
            seed_freelancer(uow, entry)
    logger.info(f"Seeded {len(FREELANCERS)} freelancers")


if __name__ == '__main__':
    main()
