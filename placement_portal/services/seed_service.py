"""
Demo Data Seeding

Loads a small campus: one admin, three employers, five students, six jobs
and five applications. Runs only when no `admin` user exists, so it is safe
to call on every startup.

Passwords are random per role. They are logged outside production only and
should be changed immediately.
"""

import secrets
from typing import Dict, Optional

from placement_portal.core.auth import hash_password
from placement_portal.services.storage import DatabaseStorage
from placement_portal.utils.logging import get_logger

logger = get_logger(__name__)

EMPLOYERS = [
    {"username": "techcorp", "name": "Tech Corp HR", "email": "hr@techcorp.com",
     "company_name": "Tech Corp", "industry": "Software", "website": "https://techcorp.com"},
    {"username": "innovateinc", "name": "Innovate Inc HR", "email": "hr@innovate.com",
     "company_name": "Innovate Inc", "industry": "AI/ML", "website": "https://innovate.com"},
    {"username": "globalenterprises", "name": "Global Enterprises HR", "email": "hr@globalenterprises.com",
     "company_name": "Global Enterprises", "industry": "Consulting", "website": "https://globalenterprises.com"},
]

STUDENTS = [
    {"username": "alice", "name": "Alice Smith", "email": "alice@student.edu",
     "department": "Computer Science", "cgpa": 3.8, "graduation_year": 2024},
    {"username": "bob", "name": "Bob Johnson", "email": "bob@student.edu",
     "department": "Information Technology", "cgpa": 3.6, "graduation_year": 2024},
    {"username": "carol", "name": "Carol Davis", "email": "carol@student.edu",
     "department": "Computer Science", "cgpa": 3.9, "graduation_year": 2025},
    {"username": "david", "name": "David Brown", "email": "david@student.edu",
     "department": "Electronics Engineering", "cgpa": 3.5, "graduation_year": 2024},
    {"username": "emma", "name": "Emma Wilson", "email": "emma@student.edu",
     "department": "Data Science", "cgpa": 3.7, "graduation_year": 2024},
]

# (employer index, job fields)
JOBS = [
    (0, {"title": "Junior React Developer",
         "description": "We are looking for a junior developer with React skills to join our fast-growing team.",
         "requirements": "React, Node.js, TypeScript, CSS/HTML", "location": "Remote",
         "salary": "$60,000 - $70,000"}),
    (0, {"title": "Senior Backend Engineer",
         "description": "Looking for an experienced backend engineer to lead our infrastructure team.",
         "requirements": "Node.js, PostgreSQL, System Design, Docker", "location": "San Francisco, CA",
         "salary": "$120,000 - $150,000"}),
    (1, {"title": "ML Engineer",
         "description": "Join our AI/ML team to develop cutting-edge machine learning solutions.",
         "requirements": "Python, TensorFlow, PyTorch, AWS", "location": "Remote",
         "salary": "$100,000 - $130,000"}),
    (1, {"title": "Data Scientist",
         "description": "Work with large-scale datasets and build predictive models.",
         "requirements": "Python, SQL, Pandas, Statistics", "location": "New York, NY",
         "salary": "$90,000 - $120,000"}),
    (2, {"title": "Management Consultant",
         "description": "Help our clients solve complex business problems and drive transformations.",
         "requirements": "Problem-solving, Communication, Analytics", "location": "Various",
         "salary": "$80,000 - $100,000"}),
    (2, {"title": "Full Stack Developer",
         "description": "Build end-to-end solutions for our enterprise clients.",
         "requirements": "React, Node.js, MongoDB, AWS", "location": "Chicago, IL",
         "salary": "$85,000 - $110,000"}),
]

# (job index, student index)
APPLICATIONS = [(0, 0), (0, 1), (2, 4), (3, 4), (1, 2)]


def seed_database(storage: DatabaseStorage, log_credentials: bool = True) -> Optional[Dict[str, str]]:
    """
    Seed sample data if the database has no admin yet.

    Returns the generated passwords per role, or None when nothing was seeded.
    """
    if storage.get_user_by_username("admin"):
        return None

    logger.info("seeding_database")
    passwords = {role: secrets.token_hex(16) for role in ("admin", "employer", "student")}
    hashed = {role: hash_password(pw) for role, pw in passwords.items()}

    storage.register_user({
        "username": "admin", "password": hashed["admin"], "role": "admin",
        "name": "System Admin", "email": "admin@college.edu",
    })

    employers = []
    for emp in EMPLOYERS:
        employers.append(storage.register_user(
            {"username": emp["username"], "password": hashed["employer"], "role": "employer",
             "name": emp["name"], "email": emp["email"]},
            employer={"company_name": emp["company_name"], "industry": emp["industry"], "website": emp["website"]},
        ))

    students = []
    for stu in STUDENTS:
        students.append(storage.register_user(
            {"username": stu["username"], "password": hashed["student"], "role": "student",
             "name": stu["name"], "email": stu["email"]},
            student={"department": stu["department"], "cgpa": stu["cgpa"],
                     "graduation_year": stu["graduation_year"],
                     "resume_url": f"https://example.com/resume_{stu['username']}.pdf"},
        ))

    jobs = [
        storage.create_job({**fields, "employer_id": employers[emp_index]["id"]})
        for emp_index, fields in JOBS
    ]

    for job_index, student_index in APPLICATIONS:
        storage.create_application(jobs[job_index]["id"], students[student_index]["id"])

    if log_credentials:
        logger.warning(
            "demo_credentials",
            admin_username="admin",
            admin_password=passwords["admin"],
            employer_password=passwords["employer"],
            student_password=passwords["student"],
        )

    logger.info(
        "database_seeded",
        employers=len(employers), students=len(students), jobs=len(jobs), applications=len(APPLICATIONS)
    )
    return passwords
