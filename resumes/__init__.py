"""
Resumes app: document text extraction, resume sessions and saved jobs.
"""
