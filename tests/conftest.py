import pytest

SAMPLE_CV = """JANE DOE
Senior Software Engineer
jane.doe@example.com | +1 (415) 555-0134 | linkedin.com/in/janedoe
123 Main Street, San Francisco, CA 94105

SUMMARY
Backend engineer with experience building Python services on AWS.

EXPERIENCE
Senior Software Engineer at Globex Corporation
Jan 2021 - Present
- Led migration of billing services to Kubernetes
- Reduced API latency by 40%

Software Engineer | Initech LLC | 2018 - 2020
Built internal tools with Django and PostgreSQL.

EDUCATION
B.S. in Computer Science, Stanford University, 2018
GPA: 3.8/4.0, cum laude

SKILLS
Python, Django, PostgreSQL, Docker, Kubernetes, AWS
Languages: English, Spanish (native)
"""


@pytest.fixture
def sample_cv_text():
    return SAMPLE_CV
