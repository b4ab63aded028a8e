# Generated manually: Commissionerate -> DCP Zone -> Municipal Zone -> ACP Division

from django.db import migrations, models
import django.db.models.deletion


def _timestamps():
    return [
        ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
        ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Commissionerate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_timestamps(),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('code', models.CharField(blank=True, default='', max_length=50, verbose_name='Code')),
            ],
            options={
                'verbose_name': 'Commissionerate',
                'verbose_name_plural': 'Commissionerates',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='DCPZone',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_timestamps(),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('code', models.CharField(blank=True, default='', max_length=50, verbose_name='Code')),
                ('commissionerate', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='dcp_zones',
                    to='jurisdiction.commissionerate',
                    verbose_name='Commissionerate',
                )),
            ],
            options={
                'verbose_name': 'DCP Zone',
                'verbose_name_plural': 'DCP Zones',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='MunicipalZone',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_timestamps(),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('code', models.CharField(blank=True, default='', max_length=50, verbose_name='Code')),
                ('dcp_zone', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='municipal_zones',
                    to='jurisdiction.dcpzone',
                    verbose_name='DCP Zone',
                )),
            ],
            options={
                'verbose_name': 'Municipal Zone',
                'verbose_name_plural': 'Municipal Zones',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='ACPDivision',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *_timestamps(),
                ('name', models.CharField(max_length=255, verbose_name='Name')),
                ('code', models.CharField(blank=True, default='', max_length=50, verbose_name='Code')),
                ('municipal_zone', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='acp_divisions',
                    to='jurisdiction.municipalzone',
                    verbose_name='Municipal Zone',
                )),
            ],
            options={
                'verbose_name': 'ACP Division',
                'verbose_name_plural': 'ACP Divisions',
                'ordering': ['id'],
            },
        ),
    ]
