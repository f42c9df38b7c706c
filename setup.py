"""
Setup file for statetable
"""

from setuptools import setup, find_packages

with open('README.md') as f:
    readme = f.read()

setup(
    name='StateTable',
    version='0.1.0',
    description="""
    Transition-table finite-state machines, with a little language for
    declaring them.
    """.strip(),
    long_description=readme,
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['benchmark', 'docs']),
    package_dir={'statetable': 'statetable'},
    python_requires='>=3.8',
    install_requires=[
        "attrs>=19.2.0",
    ],
    extras_require={
        "visualize": ["graphviz>0.5.1"],
        "test": ["graphviz>0.5.1",
                 "pytest",
                 "pytest-benchmark"],
    },
    entry_points={
        "console_scripts": [
            "statetable-visualize = statetable._visualize:tool",
            "statetable-generate = statetable._generate:tool",
        ],
    },
    include_package_data=True,
    license="MIT",
    keywords='fsm finite state machine automata transition table',
    classifiers=[
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
)
