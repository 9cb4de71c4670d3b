from setuptools import setup

setup(name='saftpack'
	,version='v0.1.0'
	,description='Helmholtz energy functionals for SAFT type models, for bulk phases and inhomogeneous systems'
	,author='Vegard Gjeldvik Jervell'
	,author_email='vegard.g.jervell@ntnu.no'
	,packages=['saftpack']
	,install_requires=['numpy>=1.22',
                       'scipy>=1.7']
	,extras_require={'test': ['pytest']}
	)
