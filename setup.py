"""
teangaview setup: teangaview is a library for resolving and displaying
Teanga annotated corpora
"""

from setuptools import setup, find_packages
import glob
import os

REQS = [
    'pydot',
    'python-graph-core',
    'frozendict',
    'tabulate',
    'nltk >= 3.0.0',
]


setup(name='teangaview',
      version='0.1',
      packages=find_packages(),
      scripts=[f for f in glob.glob('scripts/*') if not os.path.isdir(f)],
      install_requires=REQS,
      extras_require={'test': ['pytest']})
