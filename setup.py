from setuptools import setup, find_packages

setup(
    name='vce',
    version='1.0.0',
    packages=find_packages(include=['vce', 'vce.*']),
    include_package_data=True,
    python_requires='>=3.11',
    install_requires=[
        'colored>=2.2.3',
        'halo>=0.0.31',
        'numpy>=1.26.2',
        'python-dotenv>=1.0.0',
    ],
    extras_require={
        'test': ['pytest>=8.0'],
    },
    entry_points='''
        [console_scripts]
        vce=vce.__main__:main
    ''',
    license='MIT',
    keywords='video composition animation frame deterministic rendering',
    description='A frame-deterministic video composition engine',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
)
