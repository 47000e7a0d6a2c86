# resume/ats/vocabulary.py
"""
Fixed vocabularies used by the scorers and the improvement generator

Everything here is immutable and built once at import time.
"""

from types import MappingProxyType


# Curated technical skills scanned for as substrings of the job text
TECH_SKILLS = (
    "javascript", "typescript", "python", "java", "c++", "c#", "ruby", "go",
    "rust", "swift", "kotlin", "php", "scala",
    "react", "angular", "vue", "next.js", "node.js", "express", "django",
    "flask", "fastapi", "spring",
    "aws", "azure", "gcp", "docker", "kubernetes", "terraform", "ansible",
    "jenkins", "ci/cd", "linux",
    "sql", "postgresql", "mysql", "mongodb", "redis", "elasticsearch",
    "kafka", "spark", "airflow",
    "git", "github", "gitlab", "jira", "confluence", "agile", "scrum",
    "html", "css", "sass", "tailwind", "bootstrap", "figma",
    "graphql", "rest", "api", "microservices", "serverless",
    "machine learning", "deep learning", "tensorflow", "pytorch", "nlp",
    "data analysis", "pandas", "numpy", "tableau", "power bi",
)

# A bullet "starts with an action verb" when its first word starts with
# the first five letters of one of these
ACTION_VERBS = (
    "accelerated", "achieved", "analyzed", "architected", "automated",
    "built", "collaborated", "coordinated", "created", "delivered",
    "designed", "developed", "directed", "drove", "enabled", "engineered",
    "established", "executed", "expanded", "facilitated", "generated",
    "implemented", "improved", "increased", "launched", "led", "managed",
    "mentored", "modernized", "optimized", "orchestrated", "oversaw",
    "pioneered", "planned", "reduced", "refactored", "resolved",
    "revolutionized", "scaled", "spearheaded", "standardized",
    "streamlined", "strengthened", "supervised", "transformed",
)

ACTION_VERB_PREFIXES = frozenset(verb[:5] for verb in ACTION_VERBS)

# Verbs substituted into bullets that lack one
STRONG_ACTION_VERBS = (
    "Spearheaded", "Orchestrated", "Pioneered", "Revolutionized",
    "Transformed", "Architected", "Engineered", "Optimized", "Accelerated",
    "Delivered", "Achieved", "Increased", "Reduced", "Generated",
    "Streamlined",
)

# Lead-ins stripped before a strong verb is substituted
WEAK_LEAD_INS = (
    "responsible for", "worked on", "helped with", "assisted in",
    "involved in",
)

# Units accepted after a bare number in a quantified bullet
METRIC_UNITS = (
    "users", "customers", "clients", "team", "projects", "features",
    "products",
)

BULLET_TEMPLATES = MappingProxyType({
    "technical": (
        "Designed and implemented scalable {technology} solutions serving {number}+ users with 99.9% uptime",
        "Reduced system latency by {percentage}% through optimization of {component} architecture",
        "Built automated {tool} pipeline reducing deployment time from {old_time} to {new_time}",
        "Developed RESTful APIs processing {number}+ requests daily with {percentage}% error reduction",
    ),
    "leadership": (
        "Led cross-functional team of {number} engineers delivering ${amount} revenue-generating features",
        "Mentored {number} junior developers, improving team velocity by {percentage}%",
        "Coordinated with {number}+ stakeholders to define technical roadmap and project milestones",
        "Established engineering best practices adopted by {number}+ team members organization-wide",
    ),
    "impact": (
        "Drove {percentage}% increase in user engagement through data-driven feature improvements",
        "Generated ${amount} in cost savings by automating manual processes",
        "Improved customer satisfaction scores by {percentage}% through UX enhancements",
        "Reduced bug escape rate by {percentage}% through implementation of comprehensive testing",
    ),
    "general": (
        "Collaborated with product and design teams to launch {number}+ features ahead of schedule",
        "Analyzed user data to identify opportunities resulting in {percentage}% conversion improvement",
        "Documented technical specifications and maintained {number}+ pages of system documentation",
        "Participated in on-call rotation, resolving {number}+ production incidents with {percentage}% SLA adherence",
    ),
})

# Role-title hints that pick a bullet template category, checked in order
TITLE_CATEGORY_HINTS = (
    ("technical", ("engineer", "developer", "architect")),
    ("leadership", ("lead", "manager", "director")),
    ("impact", ("analyst", "product", "marketing")),
)

# Skill hints used to infer a professional title, checked in order
TITLE_FROM_SKILLS = (
    ("Software Engineer", ("python", "java", "javascript")),
    ("Frontend Developer", ("react", "figma", "ui")),
    ("DevOps Engineer", ("aws", "docker", "kubernetes")),
    ("Data Analyst", ("sql", "analytics", "data")),
)

RECOMMENDED_SKILLS = MappingProxyType({
    "technical": (
        "Python", "JavaScript", "TypeScript", "SQL", "AWS", "Docker", "Git",
        "REST APIs", "Agile", "CI/CD",
    ),
    "soft": (
        "Leadership", "Communication", "Problem-solving", "Teamwork",
        "Project Management", "Critical Thinking",
    ),
    "tools": (
        "Jira", "Confluence", "Slack", "VS Code", "Figma",
        "Microsoft Office", "GitHub",
    ),
})

SKILL_CATEGORY_LAYOUT = ("Technical Skills", "Soft Skills", "Tools & Technologies")

SECTION_LABELS = MappingProxyType({
    "keyword_match": "Keyword Match",
    "formatting": "Formatting",
    "experience": "Experience",
    "skills": "Skills",
    "education": "Education",
    "summary": "Summary",
    "contact": "Contact",
})

SECTION_TIPS = MappingProxyType({
    "keyword_match": (
        "Add more keywords from the job description to your summary",
        "Include exact phrases from job requirements in experience bullets",
        "Add missing technical skills that appear in the job posting",
        "Use industry-standard terminology that ATS systems recognize",
        "Mirror the job title if your experience matches",
    ),
    "formatting": (
        "Use 3-5 bullet points per work experience",
        "Keep bullet points concise (1-2 lines each)",
        "Use consistent date formats throughout",
        "Ensure all sections have content",
        "Avoid tables, graphics, or unusual formatting",
    ),
    "experience": (
        "Start every bullet with a strong action verb",
        "Add quantifiable metrics (%, $, numbers) to achievements",
        "Include specific technologies and tools used",
        "Show progression and increasing responsibility",
        "Focus on impact and results, not just duties",
    ),
    "skills": (
        "List all relevant technical skills from job description",
        "Group skills by category (Technical, Tools, Soft Skills)",
        "Include programming languages, frameworks, and tools",
        "Add certifications and proficiency levels",
        "Match skill keywords exactly as written in job posting",
    ),
    "education": (
        "Include graduation date and GPA if above 3.5",
        "Add relevant coursework aligned with job",
        "List academic achievements and honors",
        "Include relevant certifications",
        "Add bootcamps or online courses completed",
    ),
    "summary": (
        "Write a 2-3 sentence professional summary",
        "Include your years of experience and specialty",
        "Mention 2-3 key skills from the job description",
        "Highlight your most impressive achievement",
        "State your career objective clearly",
    ),
    "contact": (
        "Include professional email address",
        "Add phone number with area code",
        "Include LinkedIn profile URL",
        "Add city and state/country",
        "Include portfolio or GitHub if relevant",
    ),
})
