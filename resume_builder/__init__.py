"""
Resume builder: form data + generative AI -> ATS-friendly resume HTML.
"""
