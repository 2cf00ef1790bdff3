import re

content = [
    './src/index.html',
    './src/**/*.elm',
]


def defaultExtractor(content):
    return re.findall(r'[A-Za-z0-9_:/-]+', content) or []
