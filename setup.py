from setuptools import find_packages, setup

setup(
  name = 'fasthog',
  packages = find_packages('src'),
  package_dir = {'': 'src'},
  package_data = {'fasthog.patterns': ['*.regex']},
  include_package_data = True,
  version = '1.0.0',
  license='GNU',
  description = 'fast, concurrent command line scanner for hardcoded secrets in source trees',
  keywords = ['secrets', 'security', 'scanner', 'credentials'],
  python_requires='>=3.10',
  install_requires=[
"pydantic>=2.0",
"pydantic-settings>=2.7",
"PyYAML>=6.0",
"rich>=13.0",
"typer>=0.9",
      ],
  extras_require={
    'test': [
"pytest>=7.0",
    ],
  },
  entry_points={
    'console_scripts': [
      'fasthog=fasthog.cli.main:app',
    ],
  },
  classifiers=[
    'Development Status :: 4 - Beta',
    'Intended Audience :: Developers',
    'Topic :: Security',
    'License :: OSI Approved :: GNU General Public License (GPL)',
    'Programming Language :: Python :: 3',
    'Programming Language :: Python :: 3.10',
    'Programming Language :: Python :: 3.11',
    'Programming Language :: Python :: 3.12',
  ],
)
