from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ToolshedResource',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(db_index=True, max_length=100)),
                ('type', models.CharField(choices=[('link', 'Link'), ('download', 'Download'), ('tool', 'Tool'), ('image', 'Image')], default='link', max_length=16)),
                ('url', models.URLField(blank=True, max_length=500)),
                ('file_url', models.URLField(blank=True, max_length=500)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('featured', models.BooleanField(default=False)),
                ('display_order', models.PositiveIntegerField(default=0)),
                ('download_count', models.PositiveIntegerField(default=0)),
            ],
            options={
                'db_table': 'toolshed_resources',
                'ordering': ('-featured', 'display_order', '-created_at'),
            },
        ),
    ]
